from typing import Optional, Sequence

import structlog

from ..schemas.sizing import Recommendation, SizeSchema
from .size_systems import RECOMMENDATION_SIZE_FIELD, SizeSystem, alpha_to_index


logger = structlog.get_logger("drape.sizing")


def closest_numeric(target, candidates: Sequence[int]):
    """Nearest candidate by absolute difference; ties keep the earlier (lower) candidate."""
    if target is None or not candidates:
        return target
    best = candidates[0]
    best_diff = abs(best - target)
    for c in candidates[1:]:
        d = abs(c - target)
        if d < best_diff:
            best, best_diff = c, d
    return best


def closest_alpha(target: Optional[str], candidates: Sequence[str]) -> Optional[str]:
    if not target or not candidates:
        return target
    t = alpha_to_index(target)
    if t is None:
        return target
    best, best_diff = target, None
    for c in candidates:
        idx = alpha_to_index(c)
        if idx is None:
            continue
        d = abs(idx - t)
        if best_diff is None or d < best_diff:
            best, best_diff = c, d
    return best


def clamp_to_available(schema: Optional[SizeSchema], rec: Recommendation) -> Recommendation:
    """Snap the recommended size to the nearest size the product actually stocks."""
    if schema is None or schema.available is None:
        return rec
    avail = schema.available
    field = RECOMMENDATION_SIZE_FIELD[rec.system]
    value = getattr(rec, field)
    if value is None:
        return rec

    if rec.system == SizeSystem.ALPHA:
        snapped = closest_alpha(value, avail.alpha)
    elif rec.system == SizeSystem.WAIST_INCH:
        snapped = closest_numeric(value, avail.waist)
    else:
        # collar and EU labels both land in the numeric list
        snapped = closest_numeric(value, avail.numeric)

    if snapped == value:
        return rec
    logger.debug("size_clamped", system=rec.system.value, requested=value, available=snapped)
    return rec.model_copy(update={field: snapped})
