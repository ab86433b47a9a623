"""API dependencies."""
from typing import Optional
from fastapi import Query
from app.core.database import get_db
from app.schemas import PolicyFilter
from app.services.filters import parse_filter


def get_policy_filter(
    start_date: Optional[str] = Query(None, description="Policies starting on or after (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, description="Policies ending on or before (YYYY-MM-DD)"),
    status: Optional[str] = Query(None, description="ACT, EXP or CAN (or the full name)"),
    policy_type: Optional[str] = Query(None, description="LIAB, COLL or COMP (or the full name)"),
    vehicle_make: Optional[str] = Query(None, description="Case-insensitive substring"),
    first_name: Optional[str] = Query(None, description="Case-insensitive substring"),
    last_name: Optional[str] = Query(None, description="Case-insensitive substring"),
    min_premium: Optional[str] = Query(None, description="Inclusive lower bound"),
    max_premium: Optional[str] = Query(None, description="Inclusive upper bound"),
) -> PolicyFilter:
    """Collect the nine optional filters as raw strings and validate them together.

    Parsing happens here rather than in FastAPI so malformed values surface as
    ``InvalidArgumentError`` (400) instead of a 422 validation response.
    """
    return parse_filter(
        start_date=start_date,
        end_date=end_date,
        status=status,
        policy_type=policy_type,
        vehicle_make=vehicle_make,
        first_name=first_name,
        last_name=last_name,
        min_premium=min_premium,
        max_premium=max_premium,
    )


__all__ = ["get_db", "get_policy_filter"]
