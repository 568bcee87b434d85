"""Content Validation Route: policy check for generated product content."""

from fastapi import APIRouter

from cartguard.schemas.requests import ValidateContentRequest
from cartguard.services.validate_content import validate_product_content

router = APIRouter(prefix="/api/v1/content", tags=["content"])


@router.post("/validate")
async def validate_content(body: ValidateContentRequest):
    return validate_product_content(body.content, body.policy).to_dict()
