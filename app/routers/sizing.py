from typing import Optional
from fastapi import APIRouter, Depends
import structlog

from ..config import settings
from ..security import verify_api_key
from ..schemas.sizing import (
    MissingInputsRequest,
    MissingInputsResponse,
    ParsedInput,
    ParseRequest,
    Recommendation,
    RecommendRequest,
    SchemaRequest,
    SizeSchema,
)
from ..services.input_parser import parse_user_input
from ..services.recommender import recommend_for_product
from ..services.schema_builder import detect_size_schema_from_product, schema_for_general, usual_size_prompt_key
from ..services.validation import get_missing_inputs, validate_atomic


logger = structlog.get_logger("drape")

router = APIRouter(prefix="/sizing", tags=["sizing"], dependencies=[Depends(verify_api_key)])


def _declared_gender(gender: Optional[str]) -> str:
    return gender or settings.sizing_default_gender


@router.post("/schema", response_model=SizeSchema)
async def build_schema(body: SchemaRequest) -> SizeSchema:
    # product-aware when a product is given, else the bare category/gender defaults
    schema = None
    if body.product is not None:
        schema = detect_size_schema_from_product(body.product, body.gender)
    if schema is None:
        schema = schema_for_general(body.category, _declared_gender(body.gender))
    return schema


@router.post("/parse", response_model=ParsedInput)
async def parse_text(body: ParseRequest) -> ParsedInput:
    return parse_user_input(body.text, body.size_schema)


@router.post("/missing", response_model=MissingInputsResponse)
async def missing_inputs(body: MissingInputsRequest) -> MissingInputsResponse:
    schema = body.size_schema or schema_for_general(None, settings.sizing_default_gender)
    return MissingInputsResponse(
        missing=get_missing_inputs(schema, body.user),
        issues=validate_atomic(schema, body.user),
        prompt_key=usual_size_prompt_key(schema),
    )


@router.post("/recommend", response_model=Optional[Recommendation])
async def recommend(body: RecommendRequest) -> Optional[Recommendation]:
    rec = recommend_for_product(product=body.product, user=body.user, gender=_declared_gender(body.gender))
    if rec is None:
        logger.info("recommendation_skipped", reason="no_user_context")
    return rec
