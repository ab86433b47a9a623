"""SQLAlchemy models."""
from app.models.enums import AutoPolicyType, PolicyStatus
from app.models.models import AutoPolicy
from app.core.database import Base

__all__ = ["AutoPolicy", "AutoPolicyType", "PolicyStatus", "Base"]
