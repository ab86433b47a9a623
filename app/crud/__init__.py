"""Database CRUD operations."""
from app.crud.crud import (
    find_by_id,
    find_by_policy_number,
    find_all,
    find_page,
    count,
    exists_by_id,
    save,
    save_all,
    delete_by_id,
    scan
)

__all__ = [
    "find_by_id",
    "find_by_policy_number",
    "find_all",
    "find_page",
    "count",
    "exists_by_id",
    "save",
    "save_all",
    "delete_by_id",
    "scan"
]
