import re
from typing import Any, Callable, List, Optional, Sequence, Tuple
import structlog

from ..schemas.sizing import AvailableSizes, Product, SizeSchema
from .classifier import infer_category_from_product, infer_gender_from_product, normalize_category
from .size_systems import (
    COLLAR_RANGE,
    EU_NUMERIC_RANGE,
    HEIGHT_CM,
    TAILORING_RANGE,
    USUAL_SIZE_EU,
    USER_SIZE_FIELD,
    WEIGHT_KG,
    Category,
    Gender,
    SizeSystem,
    alpha_to_index,
    in_range,
    normalize_alpha_size,
    normalize_gender,
)


logger = structlog.get_logger("drape.sizing")

DEFAULT_REQUIRED: Tuple[str, ...] = (HEIGHT_CM, WEIGHT_KG, USUAL_SIZE_EU)

# Option names that mean "size" across the storefront's languages
SIZE_OPTION_MATCHERS: Tuple[re.Pattern, ...] = (
    re.compile(r"size"),
    re.compile(r"taglia"),
    re.compile(r"talla"),
    re.compile(r"gr(ö|oe|o)(ß|ss)e"),
    re.compile(r"taille"),
    re.compile(r"maat"),
    re.compile(r"storlek"),
)

_WAIST_TOKEN = re.compile(r"\bw\s?(\d{2})\b|\b(\d{2})\s*w\b|\bwaist\s*(\d{2})\b", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*(\d+)")


def _required_for(system: SizeSystem) -> Tuple[str, ...]:
    return (HEIGHT_CM, WEIGHT_KG, USER_SIZE_FIELD[system])


def _schema(gender: Gender, category: Category, system: SizeSystem, note: str) -> SizeSchema:
    return SizeSchema(
        gender=gender,
        category=category,
        system=system,
        ask_usual=True,
        required=_required_for(system),
        notes=(note,),
    )


def schema_for_menswear(category: Any) -> SizeSchema:
    category = normalize_category(category)
    if category == Category.SHIRT:
        return _schema(Gender.MALE, Category.SHIRT, SizeSystem.SHIRT_COLLAR_EU, "mens_shirt_requires_collar_size")
    if category in (Category.TROUSER, Category.BOTTOM):
        # trousers also come in waist sizing; EU numeric stays primary until the product says otherwise
        return _schema(Gender.MALE, Category.TROUSER, SizeSystem.EU_NUMERIC, "mens_trouser_eu_numeric")
    if category == Category.UNKNOWN:
        category = Category.TOP
    return _schema(Gender.MALE, category, SizeSystem.EU_NUMERIC, "mens_eu_numeric_default")


def schema_for_womenswear(category: Any) -> SizeSchema:
    # Women's shirts and blouses use the garment size, not collar sizing
    category = normalize_category(category)
    if category in (Category.SHIRT, Category.BLOUSE):
        return _schema(Gender.FEMALE, category, SizeSystem.EU_NUMERIC, "womens_top_eu_numeric")
    if category in (Category.TROUSER, Category.BOTTOM, Category.SKIRT):
        return _schema(Gender.FEMALE, category, SizeSystem.EU_NUMERIC, "womens_bottom_eu_numeric")
    if category == Category.UNKNOWN:
        category = Category.TOP
    return _schema(Gender.FEMALE, category, SizeSystem.EU_NUMERIC, "womens_eu_numeric_default")


def schema_for_general(category: Any = None, gender: Any = None) -> SizeSchema:
    gender = normalize_gender(gender)
    if gender == Gender.MALE:
        return schema_for_menswear(category)
    if gender == Gender.FEMALE:
        return schema_for_womenswear(category)
    return _schema(Gender.UNKNOWN, normalize_category(category), SizeSystem.EU_NUMERIC, "gender_unknown_general_schema")


def find_size_option_index(product: Optional[Product]) -> int:
    if product is None:
        return -1
    for i, name in enumerate(product.options):
        name = (name or "").lower()
        if any(m.search(name) for m in SIZE_OPTION_MATCHERS):
            return i
    return -1


def collect_option_values(product: Optional[Product], option_index: int) -> List[str]:
    if product is None or option_index < 0:
        return []
    values: List[str] = []
    for variant in product.variants:
        val = variant.option(option_index)
        if val and val not in values:
            values.append(val)
    return values


def _leading_int(value: str) -> Optional[int]:
    m = _LEADING_INT.match(value or "")
    return int(m.group(1)) if m else None


def _waist_value(value: str) -> Optional[int]:
    m = _WAIST_TOKEN.search(value or "")
    if not m:
        return None
    return int(next(g for g in m.groups() if g))


def _is_tailoring(values: Sequence[str]) -> bool:
    """Jacket-style shirt sizes: every number sits in 44-60, or some number is past the collar band."""
    nums = [n for n in (_leading_int(v) for v in values) if n is not None]
    if not nums:
        return False
    if all(in_range(n, TAILORING_RANGE) for n in nums):
        return True
    return any(in_range(n, TAILORING_RANGE) and n > COLLAR_RANGE[1] for n in nums)


def _collar_signal(values: Sequence[str]) -> bool:
    has_collar = any(in_range(_leading_int(v), COLLAR_RANGE) for v in values)
    has_alpha = any(normalize_alpha_size(v) for v in values)
    return has_collar and not has_alpha


# Ordered (predicate, system) rules over a product's size labels; first match wins.
SYSTEM_PRIORITY: Tuple[Tuple[Callable[[Sequence[str]], bool], SizeSystem], ...] = (
    (lambda values: any(_waist_value(v) is not None for v in values), SizeSystem.WAIST_INCH),
    (_collar_signal, SizeSystem.SHIRT_COLLAR_EU),
    (lambda values: any(normalize_alpha_size(v) for v in values), SizeSystem.ALPHA),
    (lambda values: any(in_range(_leading_int(v), EU_NUMERIC_RANGE) for v in values), SizeSystem.EU_NUMERIC),
)


def detect_system_from_variant_values(values: Sequence[str]) -> SizeSystem:
    for predicate, system in SYSTEM_PRIORITY:
        if predicate(values):
            return system
    return SizeSystem.EU_NUMERIC


def extract_available_sizes(product: Any) -> AvailableSizes:
    product = Product.coerce(product)
    values = collect_option_values(product, find_size_option_index(product))
    numeric, alpha, waist = set(), set(), set()
    for v in values:
        a = normalize_alpha_size(v)
        if a:
            alpha.add(a)
        n = _leading_int(v)
        if n is not None:
            numeric.add(n)
        w = _waist_value(v)
        if w is not None:
            waist.add(w)
    return AvailableSizes(
        raw=tuple(values),
        numeric=tuple(sorted(numeric)),
        alpha=tuple(sorted(alpha, key=alpha_to_index)),
        waist=tuple(sorted(waist)),
    )


def _reclassify(schema: SizeSchema, system: SizeSystem, note: str) -> SizeSchema:
    return schema.model_copy(update={
        "system": system,
        "required": _required_for(system),
        "ask_usual": True,
        "notes": schema.notes + (note,),
    })


def detect_size_schema_from_product(product: Any, gender: Any = None) -> Optional[SizeSchema]:
    """Build a schema from the product's own size labels, falling back to category/gender defaults.

    A declared ``gender`` (the shopper picked menswear/womenswear) takes precedence over the
    gender inferred from the product text. Returns None only when there is no usable product
    object at all.
    """
    product = Product.coerce(product)
    if product is None:
        return None

    declared = normalize_gender(gender)
    if declared == Gender.UNKNOWN:
        declared = infer_gender_from_product(product)
    schema = schema_for_general(infer_category_from_product(product), declared)
    values = collect_option_values(product, find_size_option_index(product))

    if not values:
        schema = schema.model_copy(update={"notes": schema.notes + ("no_product_size_option_detected",)})
    else:
        detected = detect_system_from_variant_values(values)
        # collar sizing only applies to shirts that are not womenswear
        collar_candidate = schema.category == Category.SHIRT and schema.gender != Gender.FEMALE
        if detected == SizeSystem.WAIST_INCH:
            schema = _reclassify(schema, SizeSystem.WAIST_INCH, "product_uses_waist_sizing")
        elif detected == SizeSystem.ALPHA:
            schema = _reclassify(schema, SizeSystem.ALPHA, "product_uses_alpha_sizing")
        elif collar_candidate and _is_tailoring(values):
            schema = _reclassify(schema, SizeSystem.EU_NUMERIC, "mens_shirt_tailoring_sizes")
        elif collar_candidate and detected == SizeSystem.SHIRT_COLLAR_EU:
            schema = _reclassify(schema, SizeSystem.SHIRT_COLLAR_EU, "product_forces_collar_sizing")
        elif collar_candidate and schema.gender == Gender.MALE:
            schema = _reclassify(schema, SizeSystem.SHIRT_COLLAR_EU, "mens_shirt_defaulted_to_collar")
        else:
            schema = _reclassify(schema, SizeSystem.EU_NUMERIC, "product_uses_eu_numeric")

    schema = schema.model_copy(update={"available": extract_available_sizes(product)})
    logger.debug(
        "schema_detected",
        handle=product.handle,
        gender=schema.gender.value,
        category=schema.category.value,
        system=schema.system.value,
        notes=list(schema.notes),
    )
    return schema


def get_required_inputs(schema: Optional[SizeSchema]) -> List[str]:
    if schema is None or not schema.required:
        return list(DEFAULT_REQUIRED)
    return list(schema.required)


def usual_size_prompt_key(schema: Optional[SizeSchema]) -> str:
    if schema is None:
        return USUAL_SIZE_EU
    return USER_SIZE_FIELD.get(schema.system, USUAL_SIZE_EU)
