from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from logmask.api import health, mask
from logmask.core.dependencies import get_masking_service, get_settings
from logmask.core.logging import MaskingLogFilter, configure_logging

settings = get_settings()
configure_logging(
    settings.log_level,
    MaskingLogFilter(get_masking_service(), settings.log_mask_keys),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting logmask on port %s", settings.port)
    yield


app = FastAPI(title="logmask", version="1.0.0", lifespan=lifespan)
app.include_router(health.router)
app.include_router(mask.router)
