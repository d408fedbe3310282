"""User skill level: recency-weighted history, confidence, and the progression ledger.

The service is the only writer of User.scoring. Updates for one user are
serialized with a per-user lock so two submissions landing together cannot
both append a ledger entry for the same level change.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import numpy as np

from models.schemas.enums import SkillLevel
from models.schemas.skill import (
    LevelProgress,
    ScoredProject,
    SkillCalculation,
    SkillLevelBadge,
    SkillLevelUpdate,
    SkillProgressionEntry,
    UserScoring,
)
from services.scoring.framework import SKILL_THRESHOLDS, skill_level_for
from services.stores import ProjectStore, UserStore

logger = logging.getLogger(__name__)

RECENCY_DECAY = 0.1
CONFIDENCE_VOLUME_TARGET = 10
CONFIDENCE_STD_SCALE = 50

_BADGES: dict[SkillLevel, tuple[str, str]] = {
    SkillLevel.NOVICE: ("Novice Crafter", "Just starting your craft journey"),
    SkillLevel.APPRENTICE: ("Apprentice", "Learning the fundamentals"),
    SkillLevel.JOURNEYMAN: ("Journeyman", "Skilled in your craft"),
    SkillLevel.CRAFTSMAN: ("Craftsman", "Master of your trade"),
    SkillLevel.MASTER: ("Master Craftsman", "Pinnacle of craftsmanship"),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def recency_weights(count: int) -> np.ndarray:
    """e^(-0.1 i) for i = 0 (most recent) .. count-1."""
    return np.exp(-RECENCY_DECAY * np.arange(count))


def recency_weighted_average(scores_recent_first: list[float]) -> float:
    if not scores_recent_first:
        return 0.0
    scores = np.asarray(scores_recent_first, dtype=float)
    return float(np.average(scores, weights=recency_weights(len(scores))))


def calculation_confidence(scores: list[float]) -> float:
    """Volume term (saturates at 10 projects) plus consistency term (population std)."""
    if not scores:
        return 0.0
    volume = min(1.0, len(scores) / CONFIDENCE_VOLUME_TARGET)
    consistency = max(0.0, 1 - float(np.std(np.asarray(scores, dtype=float))) / CONFIDENCE_STD_SCALE)
    return 0.6 * volume + 0.4 * consistency


def calculate_progress_to_next_level(score: float, level: SkillLevel) -> LevelProgress:
    """Linear progress from the current tier's floor to the next tier's floor."""
    next_level = level.next_level()
    if next_level is None:
        return LevelProgress(progress_percentage=100.0, points_to_next=0.0, next_level_threshold=100)

    floor = SKILL_THRESHOLDS[level]
    next_floor = SKILL_THRESHOLDS[next_level]
    progress = (score - floor) / (next_floor - floor) * 100
    return LevelProgress(
        progress_percentage=max(0.0, min(100.0, progress)),
        points_to_next=max(0.0, next_floor - score),
        next_level_threshold=next_floor,
    )


def skill_level_badge(level: SkillLevel) -> SkillLevelBadge:
    title, description = _BADGES[level]
    return SkillLevelBadge(title=title, description=description, next_level=level.next_level())


class UserSkillLevelService:
    def __init__(
        self,
        user_store: UserStore,
        project_store: ProjectStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.user_store = user_store
        self.project_store = project_store
        self.clock = clock
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def _scored_projects(self, user_id: str) -> list[ScoredProject]:
        """The user's scored projects (score > 0), most recent first."""
        projects = await self.project_store.get_scored_projects_for_user(user_id)
        scored = [p for p in projects if p.individual_skill_score > 0]
        return sorted(scored, key=lambda p: p.created_at, reverse=True)

    async def calculate_user_skill_level(self, user_id: str) -> SkillCalculation:
        user = await self.user_store.get_user(user_id)
        history = list(user.scoring.skill_progression) if user.scoring else []

        projects = await self._scored_projects(user_id)
        if not projects:
            return SkillCalculation(
                skill_level=SkillLevel.NOVICE,
                average_score=0.0,
                project_count=0,
                confidence=0.0,
                progression_history=history,
            )

        scores = [float(p.individual_skill_score) for p in projects]
        average = recency_weighted_average(scores)
        return SkillCalculation(
            skill_level=skill_level_for(average),
            average_score=average,
            project_count=len(projects),
            confidence=calculation_confidence(scores),
            progression_history=history,
        )

    async def update_user_skill_level(self, user_id: str, new_project_id: str | None = None) -> SkillLevelUpdate:
        """Recompute the user's level and persist it, appending a ledger entry on change."""
        async with self._locks[user_id]:
            user = await self.user_store.get_user(user_id)
            current = user.scoring or UserScoring()
            old_level = current.calculated_skill_level

            calculation = await self.calculate_user_skill_level(user_id)
            now = self.clock()
            ledger = list(current.skill_progression)
            level_changed = calculation.skill_level != old_level

            if level_changed:
                achieved_at = now
                if ledger and achieved_at <= ledger[-1].achieved_at:
                    achieved_at = ledger[-1].achieved_at + timedelta(microseconds=1)
                ledger.append(
                    SkillProgressionEntry(
                        skill_level=calculation.skill_level,
                        average_score=calculation.average_score,
                        achieved_at=achieved_at,
                        project_count=calculation.project_count,
                        trigger_project_id=new_project_id,
                    )
                )

            await self.user_store.update_scoring(
                user_id,
                UserScoring(
                    average_project_score=calculation.average_score,
                    calculated_skill_level=calculation.skill_level,
                    project_count=calculation.project_count,
                    skill_progression=ledger,
                    last_score_update=now,
                ),
            )

        if level_changed:
            logger.info(
                "Skill level changed for user %s: %s -> %s (average %.1f)",
                user_id, old_level.value, calculation.skill_level.value, calculation.average_score,
            )
        return SkillLevelUpdate(
            level_changed=level_changed,
            old_level=old_level if level_changed else None,
            new_level=calculation.skill_level,
            average_score=calculation.average_score,
        )
