"""Auto policy API endpoints."""
from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from app import schemas
from app.api.deps import get_db, get_policy_filter
from app.core.config import DEFAULT_PAGE_SIZE
from app.services import policy_service

# Error bodies rendered by the PolicyServiceError handler in app.main
ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": schemas.ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": schemas.ErrorResponse},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": schemas.ErrorResponse},
}

router = APIRouter(prefix="/api/v1/policies", responses=ERROR_RESPONSES)


@router.post("", response_model=schemas.PolicyResponse, status_code=status.HTTP_201_CREATED)
def create_policy_api(
    policy: schemas.PolicyCreate,
    response: Response,
    db: Session = Depends(get_db)
):
    """Create a single policy."""
    created = policy_service.create_policy(db, policy)
    response.headers["Location"] = f"/api/v1/policies/{created.id}"
    return created


@router.post("/batch", response_model=List[schemas.PolicyResponse], status_code=status.HTTP_201_CREATED)
def create_policies_api(
    policies: List[schemas.PolicyCreate],
    db: Session = Depends(get_db)
):
    """Create several policies at once; either all are stored or none."""
    return policy_service.create_policies(db, policies)


@router.get("", response_model=schemas.PolicyPage)
def list_policies_api(
    page: int = Query(0, description="Zero-based page index"),
    size: int = Query(DEFAULT_PAGE_SIZE, description="Page size"),
    db: Session = Depends(get_db)
):
    """Page through all policies ordered by id."""
    return policy_service.get_policies_page(db, page=page, size=size)


@router.get("/all", response_model=List[schemas.PolicyResponse])
def get_all_policies_api(db: Session = Depends(get_db)):
    """Retrieve every policy. 404 when the store is empty."""
    return policy_service.get_all_policies(db)


@router.get("/filter", response_model=List[schemas.PolicyResponse])
def filter_policies_api(
    criteria: schemas.PolicyFilter = Depends(get_policy_filter),
    db: Session = Depends(get_db)
):
    """Search with any combination of the nine optional filters. No match is an empty list."""
    return policy_service.get_filtered_policies(db, criteria)


@router.get("/policy-number/{policy_number}", response_model=schemas.PolicyResponse)
def get_policy_by_number_api(policy_number: str, db: Session = Depends(get_db)):
    """Retrieve a policy by its policy number."""
    return policy_service.get_policy_by_policy_number(db, policy_number)


@router.get("/{policy_id}", response_model=schemas.PolicyResponse)
def get_policy_api(policy_id: int, db: Session = Depends(get_db)):
    """Retrieve a policy by id."""
    return policy_service.get_policy_by_id(db, policy_id)


@router.put("/{policy_id}", response_model=schemas.PolicyResponse)
def update_policy_api(
    policy_id: int,
    update: schemas.PolicyUpdate,
    db: Session = Depends(get_db)
):
    """Partially update a policy; omitted fields are left unchanged."""
    return policy_service.update_policy(db, policy_id, update)


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy_api(policy_id: int, db: Session = Depends(get_db)):
    """Delete a policy."""
    policy_service.delete_policy(db, policy_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
