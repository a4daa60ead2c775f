from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..services.size_systems import Category, Gender, Length, SizeSystem, normalize_gender


Number = Union[int, float]


def _text_or_none(v: Any) -> Optional[str]:
    if v is None or isinstance(v, (dict, list, tuple, set)):
        return None
    s = str(v).strip()
    return s or None


def _number_or_none(v: Any) -> Optional[float]:
    """Loose numeric coercion: numbers and numeric strings pass, zero/empty/garbage become None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str):
        v = v.strip().replace(",", ".")
        if not v:
            return None
        try:
            v = float(v)
        except ValueError:
            return None
    if not isinstance(v, (int, float)):
        return None
    try:
        float(v)
    except OverflowError:
        # integers past float range are never a body measurement or size
        return None
    if v != v or v in (float("inf"), float("-inf")) or v == 0:
        return None
    return int(v) if float(v).is_integer() else float(v)


class Variant(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None

    @field_validator("option1", "option2", "option3", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    def option(self, index: int) -> Optional[str]:
        return getattr(self, f"option{index + 1}", None) if 0 <= index < 3 else None


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: Optional[str] = None
    handle: Optional[str] = None
    type: Optional[str] = None
    vendor: Optional[str] = None
    tags: Tuple[str, ...] = ()
    options: Tuple[str, ...] = ()
    variants: Tuple[Variant, ...] = ()

    @field_validator("title", "handle", "type", "vendor", mode="before")
    @classmethod
    def _scalar_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, v: Any) -> Tuple[str, ...]:
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(t for t in (_text_or_none(x) for x in v) if t)

    @field_validator("options", mode="before")
    @classmethod
    def _option_names(cls, v: Any) -> Tuple[str, ...]:
        # Platform JSON sometimes sends {"name": "Size", "values": [...]} instead of bare names
        if not isinstance(v, (list, tuple)):
            return ()
        names = []
        for opt in v:
            if isinstance(opt, dict):
                opt = opt.get("name")
            name = _text_or_none(opt)
            names.append(name or "")
        return tuple(names)

    @field_validator("variants", mode="before")
    @classmethod
    def _variant_dicts(cls, v: Any) -> Tuple[Any, ...]:
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(x for x in v if isinstance(x, (dict, Variant)))

    @classmethod
    def coerce(cls, raw: Any) -> Optional["Product"]:
        """Build a Product from a loosely shaped object; anything unusable yields None."""
        if raw is None:
            return None
        if isinstance(raw, Product):
            return raw
        if not isinstance(raw, dict):
            return None
        try:
            return cls.model_validate(raw)
        except ValidationError:
            return None


class UserMeasurements(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    height_cm: Optional[Number] = None
    weight_kg: Optional[Number] = None
    usual_size_eu: Optional[Number] = None
    shirt_size_eu: Optional[Number] = None
    alpha_size: Optional[str] = None
    waist_inch: Optional[Number] = None
    gender: Optional[Gender] = None

    @field_validator("height_cm", "weight_kg", "usual_size_eu", "shirt_size_eu", "waist_inch", mode="before")
    @classmethod
    def _loose_number(cls, v: Any) -> Optional[float]:
        return _number_or_none(v)

    @field_validator("alpha_size", mode="before")
    @classmethod
    def _loose_alpha(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("gender", mode="before")
    @classmethod
    def _loose_gender(cls, v: Any) -> Optional[Gender]:
        if v is None:
            return None
        g = normalize_gender(v)
        return None if g == Gender.UNKNOWN else g

    @classmethod
    def coerce(cls, raw: Any) -> "UserMeasurements":
        if isinstance(raw, UserMeasurements):
            return raw
        if not isinstance(raw, dict):
            return cls()
        try:
            return cls.model_validate(raw)
        except ValidationError:
            return cls()


class AvailableSizes(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw: Tuple[str, ...] = ()
    numeric: Tuple[int, ...] = ()
    alpha: Tuple[str, ...] = ()
    waist: Tuple[int, ...] = ()


class SizeSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    gender: Gender = Gender.UNKNOWN
    category: Category = Category.UNKNOWN
    system: SizeSystem = SizeSystem.EU_NUMERIC
    ask_usual: bool = True
    required: Tuple[str, ...] = ("height_cm", "weight_kg", "usual_size_eu")
    available: Optional[AvailableSizes] = None
    notes: Tuple[str, ...] = ()


class ParsedInput(BaseModel):
    height_cm: Optional[int] = None
    weight_kg: Optional[int] = None
    usual_size_eu: Optional[int] = None
    shirt_size_eu: Optional[int] = None
    alpha_size: Optional[str] = None
    waist_inch: Optional[int] = None
    ambiguous_numbers: List[int] = Field(default_factory=list)


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    system: SizeSystem
    gender: Gender = Gender.UNKNOWN
    category: Category = Category.UNKNOWN
    length: Length = Length.STANDARD
    size_eu: Optional[Number] = None
    shirt_size_eu: Optional[Number] = None
    alpha_size: Optional[str] = None
    waist_inch: Optional[Number] = None
    used_usual_as_anchor: bool = False


# HTTP request/response bodies

class SchemaRequest(BaseModel):
    product: Optional[Dict[str, Any]] = None
    category: Optional[str] = None
    gender: Optional[str] = None


class ParseRequest(BaseModel):
    text: str = ""
    size_schema: Optional[SizeSchema] = Field(None, alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class MissingInputsRequest(BaseModel):
    size_schema: Optional[SizeSchema] = Field(None, alias="schema")
    user: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class MissingInputsResponse(BaseModel):
    missing: List[str]
    issues: List[str]
    prompt_key: str


class RecommendRequest(BaseModel):
    product: Optional[Dict[str, Any]] = None
    user: Optional[Dict[str, Any]] = None
    gender: Optional[str] = None
