from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MaskStringRequest(BaseModel):
    value: str
    key: str


class MaskRegexRequest(BaseModel):
    value: str
    key: str
    name: str


class MaskJsonRequest(BaseModel):
    """Serialized JSON document plus the ``json`` section key holding its path rules."""

    payload: str
    key: str


class MaskResponse(BaseModel):
    status: str = "ok"
    masked: str


class MaskKeysResponse(BaseModel):
    string: list[str] = Field(default_factory=list)
    regex: list[str] = Field(default_factory=list)
    json_keys: list[str] = Field(default_factory=list, alias="json")

    model_config = ConfigDict(populate_by_name=True)
