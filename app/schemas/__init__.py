"""Pydantic schemas."""
from app.schemas.schemas import (
    PolicyBase, PolicyCreate, PolicyUpdate, PolicyResponse, PolicyPage,
    PolicyFilter, ErrorResponse
)

__all__ = [
    "PolicyBase", "PolicyCreate", "PolicyUpdate", "PolicyResponse", "PolicyPage",
    "PolicyFilter", "ErrorResponse"
]
