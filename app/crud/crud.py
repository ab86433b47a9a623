"""Database CRUD operations for auto policies (the record store)."""
from functools import wraps
from typing import Iterable, List, Optional
from sqlalchemy import and_, func, select, true
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.models import AutoPolicy
from app.core.exceptions import PolicyConflictError, StoreUnavailableError
from app.core.logging_config import logger


def store_operation(operation):
    """Translate SQLAlchemy failures into the service error taxonomy.

    The session is rolled back so the request can still be closed cleanly.
    Nothing is retried here.
    """
    @wraps(operation)
    def wrapper(db: Session, *args, **kwargs):
        try:
            return operation(db, *args, **kwargs)
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Store rejected {operation.__name__}: {e.orig}")
            raise PolicyConflictError(
                "Policy number already exists or record violates a store constraint.",
                details={"operation": operation.__name__},
            ) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store call {operation.__name__} failed: {e}")
            raise StoreUnavailableError(
                "Policy store is unavailable.",
                details={"operation": operation.__name__},
            ) from e
    return wrapper


@store_operation
def find_by_id(db: Session, policy_id: int) -> Optional[AutoPolicy]:
    """Get a policy by its surrogate id."""
    return db.get(AutoPolicy, policy_id)


@store_operation
def find_by_policy_number(db: Session, policy_number: str) -> Optional[AutoPolicy]:
    """Get a policy by its natural key."""
    return db.execute(
        select(AutoPolicy).where(AutoPolicy.policy_number == policy_number)
    ).scalar_one_or_none()


@store_operation
def find_all(db: Session) -> List[AutoPolicy]:
    """Retrieve every policy, ordered by id."""
    return list(db.execute(select(AutoPolicy).order_by(AutoPolicy.id)).scalars().all())


@store_operation
def find_page(db: Session, offset: int = 0, limit: int = 10) -> List[AutoPolicy]:
    """Retrieve one page of policies, ordered by id."""
    stmt = select(AutoPolicy).order_by(AutoPolicy.id).offset(offset).limit(limit)
    return list(db.execute(stmt).scalars().all())


@store_operation
def count(db: Session) -> int:
    """Number of stored policies."""
    return db.execute(select(func.count()).select_from(AutoPolicy)).scalar_one()


@store_operation
def exists_by_id(db: Session, policy_id: int) -> bool:
    """Delete-check: whether a policy with this id exists."""
    stmt = select(AutoPolicy.id).where(AutoPolicy.id == policy_id)
    return db.execute(stmt).first() is not None


@store_operation
def save(db: Session, policy: AutoPolicy) -> AutoPolicy:
    """Insert a new policy or flush changes to a loaded one."""
    db.add(policy)
    db.commit()
    db.refresh(policy)
    return policy


@store_operation
def save_all(db: Session, policies: Iterable[AutoPolicy]) -> List[AutoPolicy]:
    """Insert several policies in one transaction: all are stored or none."""
    policies = list(policies)
    db.add_all(policies)
    db.commit()
    for policy in policies:
        db.refresh(policy)
    return policies


@store_operation
def delete_by_id(db: Session, policy_id: int) -> None:
    """Remove a policy. Deleting a missing id is a no-op."""
    policy = db.get(AutoPolicy, policy_id)
    if policy is not None:
        db.delete(policy)
        db.commit()


@store_operation
def scan(db: Session, predicates: Iterable) -> List[AutoPolicy]:
    """Return policies matching the conjunction of ``predicates``.

    An empty predicate set matches every record.
    """
    predicates = list(predicates)
    criterion = and_(*predicates) if predicates else true()
    stmt = select(AutoPolicy).where(criterion).order_by(AutoPolicy.id)
    return list(db.execute(stmt).scalars().all())
