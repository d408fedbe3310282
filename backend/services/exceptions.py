"""Exceptions raised by the scoring engine and its stores."""


class ScoringEngineError(Exception):
    """Base class for every engine error."""


class InvalidCraftTypeError(ScoringEngineError, ValueError):
    def __init__(self, craft_type: object):
        self.craft_type = craft_type
        super().__init__(f"Unknown craft type: {craft_type!r}")


class WeightTableError(ScoringEngineError, ValueError):
    """A criterion weight table is incomplete or does not sum to 1.0."""


class ScoreOutOfRangeError(ScoringEngineError, ValueError):
    def __init__(self, score: float):
        self.score = score
        super().__init__(f"Score {score} is outside [0, 100]")


class OracleError(ScoringEngineError):
    """The oracle produced no usable reply."""


class ReviewNotFoundError(ScoringEngineError, LookupError):
    def __init__(self, review_id: str):
        self.review_id = review_id
        super().__init__(f"Review request {review_id} not found")


class InvalidReviewTransitionError(ScoringEngineError):
    def __init__(self, review_id: str, current: str, target: str):
        self.review_id = review_id
        self.current = current
        self.target = target
        super().__init__(
            f"Review request {review_id} cannot move from {current} to {target}"
        )


class UserNotFoundError(ScoringEngineError, LookupError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class ScoringResultNotFoundError(ScoringEngineError, LookupError):
    def __init__(self, scoring_id: str):
        self.scoring_id = scoring_id
        super().__init__(f"Scoring result {scoring_id} not found")


class PermissionDeniedError(ScoringEngineError):
    """A store refused the operation for authorization reasons."""
