from enum import Enum
from typing import Dict, Optional, Tuple


class SizeSystem(str, Enum):
    EU_NUMERIC = "eu_numeric"
    SHIRT_COLLAR_EU = "shirt_collar_eu"
    ALPHA = "alpha"
    WAIST_INCH = "waist_inch"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class Category(str, Enum):
    UNKNOWN = "unknown"
    TOP = "top"
    BOTTOM = "bottom"
    OUTERWEAR = "outerwear"
    SHIRT = "shirt"
    KNIT = "knit"
    TSHIRT = "tshirt"
    TROUSER = "trouser"
    COAT = "coat"
    JACKET = "jacket"
    DRESS = "dress"
    SKIRT = "skirt"
    BLOUSE = "blouse"


class Length(str, Enum):
    SHORT = "short"
    STANDARD = "standard"
    LONG = "long"


# Atomic user inputs a schema can require
HEIGHT_CM = "height_cm"
WEIGHT_KG = "weight_kg"
USUAL_SIZE_EU = "usual_size_eu"
SHIRT_SIZE_EU = "shirt_size_eu"
ALPHA_SIZE = "alpha_size"
WAIST_INCH = "waist_inch"

# User-side size field that anchors each system
USER_SIZE_FIELD: Dict[SizeSystem, str] = {
    SizeSystem.EU_NUMERIC: USUAL_SIZE_EU,
    SizeSystem.SHIRT_COLLAR_EU: SHIRT_SIZE_EU,
    SizeSystem.ALPHA: ALPHA_SIZE,
    SizeSystem.WAIST_INCH: WAIST_INCH,
}

# Recommendation-side size field populated for each system
RECOMMENDATION_SIZE_FIELD: Dict[SizeSystem, str] = {
    SizeSystem.EU_NUMERIC: "size_eu",
    SizeSystem.SHIRT_COLLAR_EU: "shirt_size_eu",
    SizeSystem.ALPHA: "alpha_size",
    SizeSystem.WAIST_INCH: "waist_inch",
}

# Inclusive ranges used to recognize numbers as belonging to a system
COLLAR_RANGE: Tuple[int, int] = (37, 46)
EU_NUMERIC_RANGE: Tuple[int, int] = (34, 60)
WAIST_RANGE: Tuple[int, int] = (24, 48)
TAILORING_RANGE: Tuple[int, int] = (44, 60)
HEIGHT_RANGE: Tuple[int, int] = (140, 210)
WEIGHT_RANGE: Tuple[int, int] = (40, 180)

ALPHA_ORDER: Tuple[str, ...] = ("XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL")

ALPHA_ALIASES: Dict[str, str] = {
    "extra small": "xs",
    "xsmall": "xs",
    "small": "s",
    "medium": "m",
    "large": "l",
    "extra large": "xl",
    "xlarge": "xl",
    "2xl": "xxl",
    "3xl": "xxxl",
}


def in_range(value: Optional[float], bounds: Tuple[int, int]) -> bool:
    if value is None:
        return False
    return bounds[0] <= value <= bounds[1]


def clamp(value, low, high):
    if value is None:
        return value
    return max(low, min(high, value))


def normalize_alpha_size(value) -> Optional[str]:
    """Map a letter size or common alias ("Medium", "x-large", "2XL") to its canonical token."""
    if value is None:
        return None
    v = str(value).lower().replace(".", "").strip()
    if not v:
        return None
    v = " ".join(v.split())
    v = ALPHA_ALIASES.get(v, v)
    v = v.replace("-", "").replace(" ", "")
    v = ALPHA_ALIASES.get(v, v)
    upper = v.upper()
    return upper if upper in ALPHA_ORDER else None


def alpha_to_index(value) -> Optional[int]:
    norm = normalize_alpha_size(value)
    if norm is None:
        return None
    return ALPHA_ORDER.index(norm)


_GENDER_ALIASES: Dict[str, Gender] = {
    "male": Gender.MALE,
    "m": Gender.MALE,
    "man": Gender.MALE,
    "men": Gender.MALE,
    "mens": Gender.MALE,
    "menswear": Gender.MALE,
    "female": Gender.FEMALE,
    "f": Gender.FEMALE,
    "w": Gender.FEMALE,
    "woman": Gender.FEMALE,
    "women": Gender.FEMALE,
    "womens": Gender.FEMALE,
    "womenswear": Gender.FEMALE,
    "ladies": Gender.FEMALE,
}


def normalize_gender(value) -> Gender:
    """Accept the flow's 'men'/'women' labels as well as engine values; anything else is unknown."""
    if isinstance(value, Gender):
        return value
    if value is None:
        return Gender.UNKNOWN
    key = str(value).strip().lower().replace("'", "").replace("’", "")
    return _GENDER_ALIASES.get(key, Gender.UNKNOWN)
