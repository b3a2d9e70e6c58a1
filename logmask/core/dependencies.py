from __future__ import annotations

from functools import lru_cache

from logmask.core.config import MaskConfig, Settings, load_mask_config, load_settings
from logmask.core.pattern_cache import PatternCache
from logmask.services.masking import MaskingService


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_mask_config() -> MaskConfig:
    return load_mask_config(get_settings())


@lru_cache
def get_pattern_cache() -> PatternCache:
    return PatternCache()


@lru_cache
def get_masking_service() -> MaskingService:
    return MaskingService(get_mask_config(), get_pattern_cache())
