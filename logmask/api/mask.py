from __future__ import annotations

from fastapi import APIRouter, Depends

from logmask.core.dependencies import get_masking_service
from logmask.schemas.mask import (
    MaskJsonRequest,
    MaskKeysResponse,
    MaskRegexRequest,
    MaskResponse,
    MaskStringRequest,
)
from logmask.services.masking import MaskingService

router = APIRouter(prefix="/mask")


@router.post("/string", response_model=MaskResponse)
def mask_string(
    request: MaskStringRequest,
    service: MaskingService = Depends(get_masking_service),  # noqa: B008
) -> MaskResponse:
    return MaskResponse(masked=service.mask_string(request.value, request.key))


@router.post("/regex", response_model=MaskResponse)
def mask_regex(
    request: MaskRegexRequest,
    service: MaskingService = Depends(get_masking_service),  # noqa: B008
) -> MaskResponse:
    return MaskResponse(masked=service.mask_regex(request.value, request.key, request.name))


@router.post("/json", response_model=MaskResponse)
def mask_json(
    request: MaskJsonRequest,
    service: MaskingService = Depends(get_masking_service),  # noqa: B008
) -> MaskResponse:
    return MaskResponse(masked=service.mask_json(request.payload, request.key))


@router.get("/keys", response_model=MaskKeysResponse, response_model_by_alias=True)
def list_keys(
    service: MaskingService = Depends(get_masking_service),  # noqa: B008
) -> MaskKeysResponse:
    """List configured rule keys per section without exposing the rules themselves."""
    return MaskKeysResponse.model_validate(service.configured_keys())
