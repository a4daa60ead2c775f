from typing import Any, Optional

import structlog

from ..schemas.sizing import Product, Recommendation, SizeSchema, UserMeasurements
from .availability import clamp_to_available
from .classifier import infer_category_from_product, infer_gender_from_product
from .derivation import (
    derive_alpha_size,
    derive_eu_size,
    derive_shirt_collar,
    derive_waist_inch,
    resolve_length,
)
from .schema_builder import detect_size_schema_from_product, schema_for_general
from .size_systems import (
    RECOMMENDATION_SIZE_FIELD,
    Category,
    Gender,
    SizeSystem,
    normalize_alpha_size,
    normalize_gender,
)


logger = structlog.get_logger("drape.sizing")


def _anchor_or_derive(schema: SizeSchema, user: UserMeasurements):
    """Return (size, used_anchor) for the schema's system."""
    h, w, g = user.height_cm, user.weight_kg, schema.gender
    if schema.system == SizeSystem.SHIRT_COLLAR_EU:
        if user.shirt_size_eu:
            return user.shirt_size_eu, True
        return derive_shirt_collar(h, w), False
    if schema.system == SizeSystem.ALPHA:
        if user.alpha_size:
            return normalize_alpha_size(user.alpha_size) or user.alpha_size, True
        return derive_alpha_size(h, w, g), False
    if schema.system == SizeSystem.WAIST_INCH:
        if user.waist_inch:
            return user.waist_inch, True
        return derive_waist_inch(h, w, g), False
    if user.usual_size_eu:
        return user.usual_size_eu, True
    return derive_eu_size(h, w, g), False


def recommend(schema: Optional[SizeSchema], user: Any) -> Recommendation:
    """Anchor on the user's usual size when known, otherwise estimate from height/weight.

    Length is always resolved from height, and the size is snapped to the product's
    stocked sizes whenever the schema carries an availability snapshot.
    """
    user = UserMeasurements.coerce(user)
    if schema is None:
        schema = schema_for_general(Category.UNKNOWN, Gender.UNKNOWN)

    size, anchored = _anchor_or_derive(schema, user)
    size_field = RECOMMENDATION_SIZE_FIELD[schema.system]

    rec = Recommendation(
        system=schema.system,
        gender=schema.gender,
        category=schema.category,
        length=resolve_length(user.height_cm, schema.gender),
        used_usual_as_anchor=anchored,
        **{size_field: size},
    )
    if not anchored:
        logger.debug("size_derived", system=schema.system.value, gender=schema.gender.value, size=size)
    return clamp_to_available(schema, rec)


def recommend_for_product(product: Any = None, user: Any = None, gender: Any = None) -> Optional[Recommendation]:
    """Entry point for the chat flow: product (optional) + running profile -> Recommendation.

    Returns None only when no user context was supplied.
    """
    if user is None:
        return None

    measurements = UserMeasurements.coerce(user)
    declared = normalize_gender(gender)
    if declared == Gender.UNKNOWN and measurements.gender is not None:
        declared = measurements.gender

    schema = detect_size_schema_from_product(product, declared) if product is not None else None
    if schema is None:
        coerced = Product.coerce(product)
        fallback_gender = declared if declared != Gender.UNKNOWN else infer_gender_from_product(coerced)
        schema = schema_for_general(infer_category_from_product(coerced), fallback_gender)

    rec = recommend(schema, measurements)
    logger.info(
        "size_recommended",
        system=rec.system.value,
        gender=rec.gender.value,
        category=rec.category.value,
        length=rec.length.value,
        anchored=rec.used_usual_as_anchor,
        notes=list(schema.notes),
    )
    return rec
