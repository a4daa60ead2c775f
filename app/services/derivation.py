from typing import Optional, Sequence, Tuple

from .size_systems import ALPHA_ORDER, Gender, Length, clamp, normalize_gender


# Banded lookups: ((upper_bound_exclusive, value), ...) followed by the value past the last bound.
Bands = Tuple[Tuple[Tuple[float, int], ...], int]

# EU numeric, keyed by frame index
EU_BANDS_MALE: Bands = (((43, 46), (47, 48), (51, 50), (55, 52)), 54)
EU_BANDS_FEMALE: Bands = (((34, 34), (38, 36), (42, 38), (46, 40), (50, 42), (54, 44)), 46)
EU_BANDS_NEUTRAL: Bands = (((38, 36), (44, 40), (50, 44)), 48)

# (height threshold, bump) applied cumulatively for tall customers
EU_TALL_STEPS_MALE: Tuple[Tuple[int, int], ...] = ((195, 2), (205, 2))
EU_TALL_STEPS_FEMALE: Tuple[Tuple[int, int], ...] = ((175, 2), (182, 2))

EU_LIMITS = {
    Gender.MALE: (44, 60),
    Gender.FEMALE: (32, 48),
    Gender.UNKNOWN: (34, 58),
}

# Collar, keyed by weight in kg
COLLAR_BANDS: Bands = (((65, 38), (72, 39), (80, 40), (88, 41), (96, 42)), 43)
COLLAR_LIMITS = (37, 46)

# Alpha rank index (into ALPHA_ORDER), keyed by frame index
ALPHA_BANDS_FEMALE: Bands = (((30, 1), (34, 2), (38, 3), (42, 4)), 5)
ALPHA_BANDS_MALE: Bands = (((40, 2), (46, 3), (52, 4), (58, 5)), 6)

# Waist inches, keyed by weight in kg
WAIST_BANDS_FEMALE: Bands = (((55, 26), (62, 27), (70, 28), (78, 30), (86, 32)), 34)
WAIST_BANDS_MALE: Bands = (((65, 29), (73, 30), (82, 32), (92, 34), (104, 36)), 38)
WAIST_LIMITS = (24, 48)

# Collar and waist share the same height nudges
TALL_NUDGE_CM = 190
SHORT_NUDGE_CM = 168

# (short below, standard up to and including)
LENGTH_BREAKPOINTS = {
    Gender.MALE: (170, 184),
    Gender.FEMALE: (162, 172),
    Gender.UNKNOWN: (166, 180),
}


def _band(value: float, bands: Bands) -> int:
    steps, last = bands
    for bound, result in steps:
        if value < bound:
            return result
    return last


def _height_nudge(height_cm: float) -> int:
    if height_cm >= TALL_NUDGE_CM:
        return 1
    if height_cm <= SHORT_NUDGE_CM:
        return -1
    return 0


def _tall_bump(height_cm: float, steps: Sequence[Tuple[int, int]]) -> int:
    return sum(bump for threshold, bump in steps if height_cm >= threshold)


def frame_index(height_cm: Optional[float], weight_kg: Optional[float]) -> Optional[float]:
    """Weight per metre of height; a coarse build proxy, not BMI."""
    if not height_cm or not weight_kg:
        return None
    return weight_kg / (height_cm / 100)


def derive_eu_size(height_cm, weight_kg, gender=None) -> Optional[int]:
    fi = frame_index(height_cm, weight_kg)
    if fi is None:
        return None
    gender = normalize_gender(gender)
    if gender == Gender.MALE:
        size = _band(fi, EU_BANDS_MALE) + _tall_bump(height_cm, EU_TALL_STEPS_MALE)
    elif gender == Gender.FEMALE:
        size = _band(fi, EU_BANDS_FEMALE) + _tall_bump(height_cm, EU_TALL_STEPS_FEMALE)
    else:
        size = _band(fi, EU_BANDS_NEUTRAL)
    low, high = EU_LIMITS[gender]
    return clamp(size, low, high)


def derive_shirt_collar(height_cm, weight_kg) -> Optional[int]:
    if not height_cm or not weight_kg:
        return None
    collar = _band(weight_kg, COLLAR_BANDS) + _height_nudge(height_cm)
    return clamp(collar, *COLLAR_LIMITS)


def derive_alpha_size(height_cm, weight_kg, gender=None) -> Optional[str]:
    fi = frame_index(height_cm, weight_kg)
    if fi is None:
        return None
    bands = ALPHA_BANDS_FEMALE if normalize_gender(gender) == Gender.FEMALE else ALPHA_BANDS_MALE
    return ALPHA_ORDER[_band(fi, bands)]


def derive_waist_inch(height_cm, weight_kg, gender=None) -> Optional[int]:
    if not height_cm or not weight_kg:
        return None
    bands = WAIST_BANDS_FEMALE if normalize_gender(gender) == Gender.FEMALE else WAIST_BANDS_MALE
    waist = _band(weight_kg, bands) + _height_nudge(height_cm)
    return clamp(waist, *WAIST_LIMITS)


def resolve_length(height_cm, gender=None) -> Length:
    if not height_cm:
        return Length.STANDARD
    short_below, standard_max = LENGTH_BREAKPOINTS[normalize_gender(gender)]
    if height_cm < short_below:
        return Length.SHORT
    if height_cm <= standard_max:
        return Length.STANDARD
    return Length.LONG
