from typing import Any, List, Optional

from ..schemas.sizing import SizeSchema, UserMeasurements
from .schema_builder import get_required_inputs
from .size_systems import Gender, SizeSystem, normalize_alpha_size


HEIGHT_LIMITS = (145, 205)
WEIGHT_LIMITS = (40, 180)
BMI_LIMITS = (15, 60)

EU_SIZE_LIMITS = {
    Gender.FEMALE: (32, 48),
    Gender.MALE: (42, 60),
    Gender.UNKNOWN: (32, 60),
}
COLLAR_SIZE_LIMITS = (35, 47)
WAIST_SIZE_LIMITS = (24, 48)


def _outside(value, limits) -> bool:
    return bool(value) and (value < limits[0] or value > limits[1])


def get_missing_inputs(schema: Optional[SizeSchema], user: Any) -> List[str]:
    """Required inputs the user has not supplied yet, in the order they should be asked."""
    user = UserMeasurements.coerce(user)
    return [field for field in get_required_inputs(schema) if not getattr(user, field, None)]


def validate_atomic(schema: Optional[SizeSchema], user: Any) -> List[str]:
    """Light guardrails; returns the fields that look wrong and never blocks a recommendation."""
    user = UserMeasurements.coerce(user)
    issues: List[str] = []

    if _outside(user.height_cm, HEIGHT_LIMITS):
        issues.append("height_cm")
    if _outside(user.weight_kg, WEIGHT_LIMITS):
        issues.append("weight_kg")

    if user.height_cm and user.weight_kg:
        h = user.height_cm / 100
        bmi = user.weight_kg / (h * h)
        if bmi < BMI_LIMITS[0] or bmi > BMI_LIMITS[1]:
            issues.append("height_weight_mismatch")

    if schema is None:
        return issues

    if schema.system == SizeSystem.EU_NUMERIC and _outside(user.usual_size_eu, EU_SIZE_LIMITS[schema.gender]):
        issues.append("usual_size_eu")
    if schema.system == SizeSystem.SHIRT_COLLAR_EU and _outside(user.shirt_size_eu, COLLAR_SIZE_LIMITS):
        issues.append("shirt_size_eu")
    if schema.system == SizeSystem.WAIST_INCH and _outside(user.waist_inch, WAIST_SIZE_LIMITS):
        issues.append("waist_inch")
    if schema.system == SizeSystem.ALPHA and user.alpha_size and not normalize_alpha_size(user.alpha_size):
        issues.append("alpha_size")

    return issues
