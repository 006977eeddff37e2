from enum import Enum


class BaseEnum(Enum):
    @classmethod
    def values(cls):
        return [item.value for item in cls]


class Provenance(BaseEnum):
    """Submission path that wrote an answer."""
    INDIVIDUAL = "individual"
    COMPLETION = "completion"
    TIMEOUT = "timeout"


class WinnerOption(BaseEnum):
    PRODUCT = "product"
    CASH = "cash"


class WinnerStatus(BaseEnum):
    PENDING = "pending"
    APPROVED = "approved"
    DELIVERED = "delivered"
    REJECTED = "rejected"
