"""Per-craft lookup tables used in prompts and result metadata.

Every table is keyed by CraftType and must carry a GENERAL entry; lookups for a
craft without its own row fall back to GENERAL.
"""

from models.responses import CraftTypeMetadata
from models.schemas.enums import CraftType

SAFETY_CONSIDERATIONS: dict[CraftType, list[str]] = {
    CraftType.WOODWORKING: ["Eye and hearing protection", "Dust collection", "Blade guards", "Safe feeding techniques"],
    CraftType.METALWORKING: ["Heat protection", "Ventilation for fumes", "Eye protection for welding", "Fire safety"],
    CraftType.POTTERY: ["Clay dust prevention", "Kiln safety", "Chemical safety for glazes", "Proper lifting techniques"],
    CraftType.WEAVING: ["Proper posture", "Eye strain prevention", "Repetitive motion injury prevention"],
    CraftType.LEATHERCRAFT: ["Sharp blade handling", "Chemical safety for dyes", "Ventilation for solvents"],
    CraftType.JEWELRY: ["Torch safety", "Chemical safety for acids", "Eye protection for detail work"],
    CraftType.BLACKSMITHING: ["Fire safety", "Heat protection", "Ventilation", "Tool handling"],
    CraftType.BUSHCRAFT: ["Knife safety", "Fire safety", "Weather awareness", "First aid preparedness"],
    CraftType.STONEMASONRY: ["Dust protection", "Heavy lifting safety", "Tool maintenance", "Eye protection"],
    CraftType.GLASSBLOWING: ["Heat protection", "Eye protection", "Ventilation", "Tool safety"],
    CraftType.GENERAL: ["Basic PPE usage", "Safe workspace setup", "Tool handling", "Risk awareness"],
}

QUALITY_INDICATORS: dict[CraftType, list[str]] = {
    CraftType.WOODWORKING: ["Joint quality", "Surface finish", "Grain orientation", "Dimensional accuracy"],
    CraftType.METALWORKING: ["Precision tolerances", "Weld quality", "Surface finish", "Heat treatment"],
    CraftType.POTTERY: ["Wall thickness", "Form balance", "Glaze application", "Firing success"],
    CraftType.WEAVING: ["Tension consistency", "Pattern accuracy", "Edge quality", "Color transitions"],
    CraftType.LEATHERCRAFT: ["Stitch consistency", "Edge finishing", "Dye application", "Hardware attachment"],
    CraftType.JEWELRY: ["Precision work", "Stone setting", "Surface polish", "Joint quality"],
    CraftType.BLACKSMITHING: ["Heat control", "Form accuracy", "Surface texture", "Structural integrity"],
    CraftType.BUSHCRAFT: ["Functionality", "Durability", "Efficiency", "Safety integration"],
    CraftType.STONEMASONRY: ["Joint quality", "Surface finish", "Structural integrity", "Tool marks"],
    CraftType.GLASSBLOWING: ["Form consistency", "Wall thickness", "Surface quality", "Color application"],
    CraftType.GENERAL: ["Technique execution", "Attention to detail", "Functional quality", "Aesthetic appeal"],
}

EVALUATION_FOCUS: dict[CraftType, list[str]] = {
    CraftType.WOODWORKING: ["joint quality", "grain orientation", "finishing technique"],
    CraftType.METALWORKING: ["precision", "heat treatment", "surface finish"],
    CraftType.POTTERY: ["form consistency", "glazing technique", "firing results"],
    CraftType.WEAVING: ["tension consistency", "pattern execution", "edge finishing"],
    CraftType.LEATHERCRAFT: ["stitching quality", "edge finishing", "dye application"],
    CraftType.JEWELRY: ["precision work", "stone setting", "metal finishing"],
    CraftType.GENERAL: ["technique execution", "tool usage", "safety practices"],
}

COMMON_CHALLENGES: dict[CraftType, list[str]] = {
    CraftType.WOODWORKING: ["wood movement", "grain tear-out", "joint fitting"],
    CraftType.METALWORKING: ["heat control", "material warping", "surface oxidation"],
    CraftType.POTTERY: ["cracking", "glazing defects", "firing issues"],
    CraftType.WEAVING: ["tension problems", "pattern errors", "edge distortion"],
    CraftType.LEATHERCRAFT: ["leather selection", "stitching consistency", "dye bleeding"],
    CraftType.JEWELRY: ["stone damage", "metal fatigue", "sizing accuracy"],
    CraftType.GENERAL: ["tool selection", "project planning", "quality consistency"],
}


def _lookup(table: dict[CraftType, list[str]], craft_type: CraftType) -> list[str]:
    return list(table.get(craft_type, table[CraftType.GENERAL]))


def safety_considerations(craft_type: CraftType) -> list[str]:
    return _lookup(SAFETY_CONSIDERATIONS, craft_type)


def quality_indicators(craft_type: CraftType) -> list[str]:
    return _lookup(QUALITY_INDICATORS, craft_type)


def craft_metadata(craft_type: CraftType) -> CraftTypeMetadata:
    """Craft-specific block attached to every scoring result."""
    return CraftTypeMetadata(
        craft_type=craft_type,
        evaluation_focus=_lookup(EVALUATION_FOCUS, craft_type),
        common_challenges=_lookup(COMMON_CHALLENGES, craft_type),
    )
