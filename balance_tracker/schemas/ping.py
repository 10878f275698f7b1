"""Pydantic schemas for the health-check and error responses."""

from typing import Any

from pydantic import BaseModel


class PingResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    detail: Any
