# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any
from pydantic import BaseModel, ConfigDict, Field

class OrderRequest(BaseModel):
    amount: float = Field(
        ..., strict=True, allow_inf_nan=False, description="Amount in rupees (major units)"
    )

class OrderSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Gateway order id")
    amount: int = Field(..., description="Amount in paise")
    currency: str
    status: str
    created_at: int | None = Field(None, description="Unix timestamp set by the gateway")

class ErrorInfo(BaseModel):
    code: int
    message: str
    details: Any | None = None

class ApiResponse(BaseModel):
    success: bool
    order: OrderSummary | None = None
    error: ErrorInfo | str | None = None

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)
