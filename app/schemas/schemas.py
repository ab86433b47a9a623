"""Pydantic schemas for request/response validation."""
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional
from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator
from app.models.enums import AutoPolicyType, PolicyStatus


def _parse_code(enum_cls):
    def parse(value):
        if value is None:
            return value
        return enum_cls.from_code(value)
    return parse


# Enums accept their code or their name, case-insensitively
Status = Annotated[PolicyStatus, BeforeValidator(_parse_code(PolicyStatus))]
PolicyType = Annotated[AutoPolicyType, BeforeValidator(_parse_code(AutoPolicyType))]
Premium = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


# --- Policy Schemas ---
class PolicyBase(BaseModel):
    policy_number: str = Field(min_length=1)
    status: Status
    policy_type: PolicyType
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    start_date: date
    end_date: date
    premium_amount: Premium


class PolicyCreate(PolicyBase):

    @model_validator(mode="after")
    def check_interval(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class PolicyUpdate(BaseModel):
    """Partial update: omitted or null fields keep their stored value."""
    policy_number: Optional[str] = None
    status: Optional[Status] = None
    policy_type: Optional[PolicyType] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    premium_amount: Optional[Premium] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually supplied with a non-null value."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class PolicyResponse(PolicyBase):
    id: int

    class Config:
        from_attributes = True
        frozen = True


class PolicyPage(BaseModel):
    items: List[PolicyResponse]
    total: int
    page: int
    size: int
    total_pages: int


# --- Filter Schema (the nine optional criteria) ---
class PolicyFilter(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[Status] = None
    policy_type: Optional[PolicyType] = None
    vehicle_make: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    min_premium: Optional[Decimal] = Field(default=None, ge=0)
    max_premium: Optional[Decimal] = Field(default=None, ge=0)

    class Config:
        frozen = True
        extra = "forbid"

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        """Empty query parameters count as absent filters."""
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @model_validator(mode="after")
    def check_ranges(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        if (
            self.min_premium is not None
            and self.max_premium is not None
            and self.min_premium > self.max_premium
        ):
            raise ValueError("min_premium must not exceed max_premium")
        return self


# --- Error Schema ---
class ErrorResponse(BaseModel):
    timestamp: str
    status: int
    error: str
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
