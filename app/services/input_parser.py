"""Free-text measurement extraction.

Handles the kind of replies shoppers type into the chat, e.g.::

    "178 cm 75 kg EU 48"
    "165/55/36"
    "I'm 180, 82, size 50"
    "shirt 40"
    "W32"
    "M"

Nothing here raises; whatever can't be resolved stays None and the caller
asks again for the missing inputs.
"""
import re
from collections import Counter
from typing import Any, Optional

import structlog

from ..schemas.sizing import ParsedInput, SizeSchema, UserMeasurements
from .size_systems import (
    COLLAR_RANGE,
    EU_NUMERIC_RANGE,
    HEIGHT_RANGE,
    WAIST_RANGE,
    WEIGHT_RANGE,
    SizeSystem,
    in_range,
    normalize_alpha_size,
)


logger = structlog.get_logger("drape.sizing")

# Standalone letter sizes; apostrophes count as word characters so "I'm" is not a size M.
_ALPHA = re.compile(
    r"(?<![\w'’-])("
    r"extra[\s-]?small|extra[\s-]?large|x-small|x-large|small|medium|large|"
    r"xxxl|xxl|xl|3xl|2xl|xxs|xs|s|m|l"
    r")(?![\w'’-])"
)
_WAIST_PREFIX = re.compile(r"\bw(\d{2})\b")
_WAIST_SUFFIX = re.compile(r"\b(\d{2})\s*w\b")
_HEIGHT_CM = re.compile(r"(\d{2,3})\s*cm\b")
_WEIGHT_KG = re.compile(r"(\d{2,3})\s*kg\b")
_EU_SIZE = re.compile(r"\beu\s*(\d{2})\b")
_SIZE_WORD = re.compile(r"\bsize\s*(\d{2})\b")
_SHIRT_SIZE = re.compile(r"\b(?:shirt|collar)\s*(\d{2})\b")
_BARE_NUMBER = re.compile(r"\b\d{2,3}\b")

# Schema-directed slot for bare numbers: (system, field, range)
_SYSTEM_SLOTS = (
    (SizeSystem.SHIRT_COLLAR_EU, "shirt_size_eu", COLLAR_RANGE),
    (SizeSystem.WAIST_INCH, "waist_inch", WAIST_RANGE),
    (SizeSystem.EU_NUMERIC, "usual_size_eu", EU_NUMERIC_RANGE),
)


def _first_int(pattern: re.Pattern, text: str, group: int = 1) -> Optional[int]:
    m = pattern.search(text)
    return int(m.group(group)) if m else None


def parse_user_input(text: Any, schema: Optional[SizeSchema] = None) -> ParsedInput:
    t = str(text).lower() if text is not None else ""
    out = ParsedInput()
    if not t.strip():
        return out

    alpha = _ALPHA.search(t)
    if alpha:
        out.alpha_size = normalize_alpha_size(alpha.group(1))

    out.waist_inch = _first_int(_WAIST_PREFIX, t)
    if out.waist_inch is None:
        out.waist_inch = _first_int(_WAIST_SUFFIX, t)

    out.height_cm = _first_int(_HEIGHT_CM, t)
    out.weight_kg = _first_int(_WEIGHT_KG, t)

    out.usual_size_eu = _first_int(_EU_SIZE, t)
    if out.usual_size_eu is None:
        out.usual_size_eu = _first_int(_SIZE_WORD, t)
    out.shirt_size_eu = _first_int(_SHIRT_SIZE, t)

    # each explicitly captured value consumes one bare occurrence of the same number
    used = Counter(
        v for v in (out.height_cm, out.weight_kg, out.usual_size_eu, out.shirt_size_eu, out.waist_inch)
        if v is not None
    )
    system = schema.system if schema is not None else None

    for token in _BARE_NUMBER.findall(t):
        n = int(token)
        if used[n]:
            used[n] -= 1
            continue

        if out.height_cm is None and in_range(n, HEIGHT_RANGE):
            out.height_cm = n
            continue

        claimed = False
        for slot_system, field, bounds in _SYSTEM_SLOTS:
            if system == slot_system and getattr(out, field) is None and in_range(n, bounds):
                setattr(out, field, n)
                claimed = True
                break
        if claimed:
            continue

        if out.weight_kg is None and in_range(n, WEIGHT_RANGE):
            out.weight_kg = n
            continue

        out.ambiguous_numbers.append(n)

    if (
        system == SizeSystem.SHIRT_COLLAR_EU
        and out.shirt_size_eu is None
        and in_range(out.usual_size_eu, COLLAR_RANGE)
    ):
        out.shirt_size_eu = out.usual_size_eu
        out.usual_size_eu = None

    logger.debug("input_parsed", system=system.value if system else None, parsed=out.model_dump())
    return out


def merge_measurements(current: Any, parsed: Any) -> UserMeasurements:
    """Overlay the fields a parse actually found onto the running profile."""
    base = UserMeasurements.coerce(current)
    if isinstance(parsed, ParsedInput):
        parsed = parsed.model_dump(exclude={"ambiguous_numbers"})
    update = UserMeasurements.coerce(parsed).model_dump(exclude_none=True)
    return base.model_copy(update=update)
