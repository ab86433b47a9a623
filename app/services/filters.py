"""Dynamic filter composition for policy searches.

A search request carries up to nine optional criteria. Each present criterion
becomes one ``FilterClause``; the record store scan folds the resulting
predicates into a single conjunction. Absent criteria contribute nothing, so an
empty request matches every policy.

The filter signature is computed from the same nine fields but independently
of clause construction. It is the key of the filtered-list cache region.
"""
import enum
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List
from pydantic import ValidationError
from sqlalchemy import func
from app.core.exceptions import InvalidArgumentError
from app.models import AutoPolicy
from app.schemas import PolicyFilter

SIGNATURE_PREFIX = "filter:"


def _contains_ignore_case(column):
    return lambda value: func.lower(column).contains(value.lower(), autoescape=True)


# Field name -> predicate factory, in signature order
CLAUSE_FACTORIES: Dict[str, Callable[[Any], Any]] = {
    "start_date": lambda value: AutoPolicy.start_date >= value,
    "end_date": lambda value: AutoPolicy.end_date <= value,
    "status": lambda value: AutoPolicy.status == value,
    "policy_type": lambda value: AutoPolicy.policy_type == value,
    "vehicle_make": _contains_ignore_case(AutoPolicy.vehicle_make),
    "first_name": _contains_ignore_case(AutoPolicy.first_name),
    "last_name": _contains_ignore_case(AutoPolicy.last_name),
    "min_premium": lambda value: AutoPolicy.premium_amount >= value,
    "max_premium": lambda value: AutoPolicy.premium_amount <= value,
}

FILTER_FIELDS = tuple(CLAUSE_FACTORIES)
TEXT_FIELDS = frozenset({"vehicle_make", "first_name", "last_name"})


@dataclass(frozen=True)
class FilterClause:
    """One optional criterion: applies only when ``value`` is present."""
    field: str
    value: Any

    @property
    def present(self) -> bool:
        return self.value is not None

    def predicate(self):
        return CLAUSE_FACTORIES[self.field](self.value)


def parse_filter(**criteria) -> PolicyFilter:
    """Validate raw criteria (query strings or typed values) into a ``PolicyFilter``.

    Raises ``InvalidArgumentError`` for unknown fields, unparsable values,
    negative premiums and inverted date or premium ranges.
    """
    try:
        return PolicyFilter(**criteria)
    except ValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "filter",
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        raise InvalidArgumentError("Invalid filter criteria.", details={"errors": errors}) from e


def build_clauses(criteria: PolicyFilter) -> List[FilterClause]:
    """Clauses for the criteria that are present, in field order."""
    clauses = [FilterClause(field, getattr(criteria, field)) for field in FILTER_FIELDS]
    return [clause for clause in clauses if clause.present]


def build_predicates(criteria: PolicyFilter) -> List[Any]:
    """Predicate set for ``crud.scan``: one expression per present criterion."""
    return [clause.predicate() for clause in build_clauses(criteria)]


def _canonical(field: str, value: Any):
    if value is None:
        # Absent fields render as JSON null
        return None
    if field in TEXT_FIELDS:
        # Matching is case-insensitive, so is the key
        return value.lower()
    if isinstance(value, Decimal):
        normalized = value.normalize()
        return format(normalized, "f")
    if isinstance(value, enum.Enum):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def filter_signature(criteria: PolicyFilter) -> str:
    """Deterministic cache key over all nine fields.

    Every field appears, absent ones as ``null``, and keys are sorted, so the
    key depends only on the field values and never on how the filter was built.
    """
    canonical = {field: _canonical(field, getattr(criteria, field)) for field in FILTER_FIELDS}
    return SIGNATURE_PREFIX + json.dumps(canonical, sort_keys=True, separators=(",", ":"))
