"""Policy enumerations, persisted and serialized by their short codes."""
import enum


class CodedEnum(str, enum.Enum):
    """String enum whose value is a short code, parsed by code or by name."""

    @classmethod
    def from_code(cls, code):
        """Case-insensitive lookup by code ("act") or member name ("Active")."""
        if isinstance(code, cls):
            return code
        text = str(code).strip().upper()
        for member in cls:
            if member.value == text or member.name == text:
                return member
        raise ValueError(f"Invalid {cls.__name__} code: {code}")

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self]


class PolicyStatus(CodedEnum):
    ACTIVE = "ACT"
    EXPIRED = "EXP"
    CANCELLED = "CAN"


class AutoPolicyType(CodedEnum):
    LIABILITY = "LIAB"
    COLLISION = "COLL"
    COMPREHENSIVE = "COMP"


DESCRIPTIONS = {
    PolicyStatus.ACTIVE: "Active Policy",
    PolicyStatus.EXPIRED: "Expired Policy",
    PolicyStatus.CANCELLED: "Cancelled Policy",
    AutoPolicyType.LIABILITY: "Covers damages to others caused by the insured driver",
    AutoPolicyType.COLLISION: "Covers damages to the insured's vehicle from a collision",
    AutoPolicyType.COMPREHENSIVE: "Covers non-collision damages (e.g., theft, fire, vandalism)",
}
