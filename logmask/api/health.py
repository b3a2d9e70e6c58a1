from __future__ import annotations

from fastapi import APIRouter, Depends

from logmask.core.dependencies import get_masking_service
from logmask.services.masking import MaskingService

router = APIRouter()


@router.get("/ping")
def ping() -> dict[str, str]:
    return {"message": "pong"}


@router.get("/healthz")
def healthz(
    service: MaskingService = Depends(get_masking_service),  # noqa: B008
) -> dict[str, object]:
    """Report how many rule keys each mask section loaded."""
    keys = service.configured_keys()
    return {"status": "ok", "rule_keys": {section: len(names) for section, names in keys.items()}}
