"""Auto policy business logic: read-through lookups and invalidate-on-write."""
import math
from typing import List
from sqlalchemy.orm import Session
from app import crud
from app import schemas
from app.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_RECORD_ID
from app.core.exceptions import InvalidArgumentError, PolicyNotFoundError
from app.core.logging_config import logger
from app.models import AutoPolicy
from app.services import filters
from app.services.cache import ALL_POLICIES_KEY, MISS, POLICY_CACHE, PolicyCacheRegions


def _to_response(policy: AutoPolicy) -> schemas.PolicyResponse:
    return schemas.PolicyResponse.model_validate(policy)


def _require_storable_id(policy_id: int) -> None:
    # Ids the store cannot hold never match a record
    if policy_id < 1 or policy_id > MAX_RECORD_ID:
        logger.warning(f"Policy not found: ID {policy_id} out of range")
        raise PolicyNotFoundError(f"Auto Policy not found with ID: {policy_id}")


# --- Lookups (read-through) ---

def get_policy_by_id(
    db: Session, policy_id: int, cache: PolicyCacheRegions = POLICY_CACHE
) -> schemas.PolicyResponse:
    """Return one policy by id, from the ``policies`` region when cached."""
    _require_storable_id(policy_id)
    cached = cache.by_id.get(policy_id)
    if cached is not MISS:
        logger.debug(f"Cache hit: policies[{policy_id}]")
        return cached

    logger.debug(f"Cache miss: policies[{policy_id}] - fetching from database")
    policy = crud.find_by_id(db, policy_id)
    if policy is None:
        logger.warning(f"Policy not found: ID {policy_id}")
        raise PolicyNotFoundError(f"Auto Policy not found with ID: {policy_id}")

    response = _to_response(policy)
    cache.by_id.put(policy_id, response)
    return response


def get_policy_by_policy_number(
    db: Session, policy_number: str, cache: PolicyCacheRegions = POLICY_CACHE
) -> schemas.PolicyResponse:
    """Return one policy by its natural key, from the ``policy_numbers`` region when cached."""
    if not policy_number or not policy_number.strip():
        raise InvalidArgumentError("Policy number must not be blank.")

    cached = cache.by_policy_number.get(policy_number)
    if cached is not MISS:
        logger.debug(f"Cache hit: policy_numbers[{policy_number}]")
        return cached

    policy = crud.find_by_policy_number(db, policy_number)
    if policy is None:
        logger.warning(f"Policy not found: number {policy_number}")
        raise PolicyNotFoundError(f"AutoPolicy with policy number {policy_number} not found")

    response = _to_response(policy)
    cache.by_policy_number.put(policy_number, response)
    return response


def get_all_policies(
    db: Session, cache: PolicyCacheRegions = POLICY_CACHE
) -> List[schemas.PolicyResponse]:
    """Return every policy.

    An empty store is reported as ``PolicyNotFoundError`` and is not cached,
    so the first create is visible immediately.
    """
    cached = cache.all_policies.get(ALL_POLICIES_KEY)
    if cached is not MISS:
        logger.debug("Cache hit: all_policies")
        return list(cached)

    policies = crud.find_all(db)
    if not policies:
        logger.warning("No auto policies found in the system")
        raise PolicyNotFoundError("No auto policies found in the system.")

    responses = tuple(_to_response(policy) for policy in policies)
    cache.all_policies.put(ALL_POLICIES_KEY, responses)
    return list(responses)


def get_policies_page(
    db: Session, page: int = 0, size: int = DEFAULT_PAGE_SIZE
) -> schemas.PolicyPage:
    """Return one page of policies ordered by id. Served from the store, never cached."""
    if page < 0:
        raise InvalidArgumentError("page must be zero or greater.", details={"page": page})
    if size < 1 or size > MAX_PAGE_SIZE:
        raise InvalidArgumentError(
            f"size must be between 1 and {MAX_PAGE_SIZE}.", details={"size": size}
        )
    if page * size > MAX_RECORD_ID:
        raise InvalidArgumentError(
            "page is beyond the last addressable row.", details={"page": page, "size": size}
        )

    total = crud.count(db)
    policies = crud.find_page(db, offset=page * size, limit=size)
    return schemas.PolicyPage(
        items=[_to_response(policy) for policy in policies],
        total=total,
        page=page,
        size=size,
        total_pages=math.ceil(total / size),
    )


def get_filtered_policies(
    db: Session, criteria: schemas.PolicyFilter, cache: PolicyCacheRegions = POLICY_CACHE
) -> List[schemas.PolicyResponse]:
    """Return the policies matching every present criterion.

    Results, including empty ones, are cached under the filter signature.
    """
    signature = filters.filter_signature(criteria)
    cached = cache.filtered.get(signature)
    if cached is not MISS:
        logger.debug(f"Cache hit: filtered_policies[{signature}]")
        return list(cached)

    logger.debug(f"Cache miss: filtered_policies[{signature}] - scanning database")
    policies = crud.scan(db, filters.build_predicates(criteria))
    responses = tuple(_to_response(policy) for policy in policies)
    cache.filtered.put(signature, responses)
    return list(responses)


# --- Mutations (invalidate on success) ---

def create_policy(
    db: Session, policy: schemas.PolicyCreate, cache: PolicyCacheRegions = POLICY_CACHE
) -> schemas.PolicyResponse:
    """Store a new policy."""
    logger.info(f"Creating policy: {policy.policy_number}")
    saved = crud.save(db, AutoPolicy(**policy.model_dump()))
    cache.on_create()
    logger.info(f"Policy created successfully: {saved.policy_number} (ID: {saved.id})")
    return _to_response(saved)


def create_policies(
    db: Session, policies: List[schemas.PolicyCreate], cache: PolicyCacheRegions = POLICY_CACHE
) -> List[schemas.PolicyResponse]:
    """Store several policies in one transaction."""
    if not policies:
        return []
    logger.info(f"Creating {len(policies)} policies in batch")
    saved = crud.save_all(db, [AutoPolicy(**policy.model_dump()) for policy in policies])
    cache.on_bulk_create()
    logger.info(f"Batch created: {[policy.id for policy in saved]}")
    return [_to_response(policy) for policy in saved]


def update_policy(
    db: Session,
    policy_id: int,
    update: schemas.PolicyUpdate,
    cache: PolicyCacheRegions = POLICY_CACHE,
) -> schemas.PolicyResponse:
    """Apply a partial update: only supplied, non-null fields change.

    The policy number is immutable; echoing the stored value is accepted.
    """
    _require_storable_id(policy_id)
    changes = update.changes()
    policy = crud.find_by_id(db, policy_id)
    if policy is None:
        logger.warning(f"Update of unknown policy: ID {policy_id}")
        raise PolicyNotFoundError(f"Auto Policy not found with ID: {policy_id}")

    new_number = changes.pop("policy_number", policy.policy_number)
    if new_number != policy.policy_number:
        raise InvalidArgumentError(
            "policy_number cannot be changed.",
            details={"policy_number": policy.policy_number},
        )
    start_date = changes.get("start_date", policy.start_date)
    end_date = changes.get("end_date", policy.end_date)
    if start_date > end_date:
        raise InvalidArgumentError(
            "start_date must not be after end_date.",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )

    for key, value in changes.items():
        setattr(policy, key, value)
    saved = crud.save(db, policy)

    response = _to_response(saved)
    cache.on_update(policy_id, response)
    logger.info(f"Policy updated: {saved.policy_number} (ID: {policy_id}) fields={sorted(changes)}")
    return response


def delete_policy(
    db: Session, policy_id: int, cache: PolicyCacheRegions = POLICY_CACHE
) -> None:
    """Remove a policy and every cached view that could include it."""
    _require_storable_id(policy_id)
    if not crud.exists_by_id(db, policy_id):
        logger.warning(f"Delete of unknown policy: ID {policy_id}")
        raise PolicyNotFoundError(f"AutoPolicy with ID {policy_id} not found")
    crud.delete_by_id(db, policy_id)
    cache.on_delete(policy_id)
    logger.info(f"Policy deleted: ID {policy_id}")
