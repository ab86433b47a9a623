"""SQLAlchemy database models."""
from sqlalchemy import CheckConstraint, Column, Date, Enum, Integer, Numeric, String
from app.core.database import Base
from app.models.enums import AutoPolicyType, PolicyStatus


def _codes(enum_cls):
    return [member.value for member in enum_cls]


# Auto insurance policy record.
# Fields:
# 1. id: surrogate primary key assigned on insert, never changes
# 2. policy_number: natural key, unique across the table, never reassigned
# 3. status / policy_type: stored as their short codes (ACT, COLL, ...)
# 4. start_date <= end_date: validity interval
# 5. premium_amount: non-negative, two decimal places
class AutoPolicy(Base):
    __tablename__ = "auto_policies"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_auto_policies_interval"),
        CheckConstraint("premium_amount >= 0", name="ck_auto_policies_premium"),
    )

    id = Column(Integer, primary_key=True, index=True)
    policy_number = Column(String, unique=True, index=True, nullable=False)
    status = Column(
        Enum(PolicyStatus, values_callable=_codes, native_enum=False, length=3),
        nullable=False,
    )
    policy_type = Column(
        Enum(AutoPolicyType, values_callable=_codes, native_enum=False, length=4),
        nullable=False,
    )
    vehicle_make = Column(String, nullable=True)
    vehicle_model = Column(String, nullable=True)
    vehicle_year = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    premium_amount = Column(Numeric(10, 2), nullable=False)

    def __repr__(self):
        return f"<AutoPolicy id={self.id} policy_number={self.policy_number!r} status={self.status}>"
