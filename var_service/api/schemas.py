"""Pydantic schemas for the VaR API."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class FetchRequest(BaseModel):
    ticker: str


class PreviewRowResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    ret: float = Field(alias="return")


class FetchResponse(BaseModel):
    ticker: str
    source: str
    returns: List[float]
    preview: List[PreviewRowResponse]


class VarRequest(BaseModel):
    # Validated by the engine so bad values map to InvalidParameter / InvalidMethod
    method: str
    returns: List[float]
    confidence: float


class VarResponse(BaseModel):
    var: float


class MethodsResponse(BaseModel):
    methods: List[str]
