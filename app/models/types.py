from enum import Enum


class UserRole(str, Enum):
    EMPLOYEE = "EMPLOYEE"
    ADMIN = "ADMIN"


class GrantType(str, Enum):
    ISO = "ISO"  # incentive stock options
    NSO = "NSO"  # non-qualified stock options
    RSU = "RSU"
    ESPP = "ESPP"


class GrantStatus(str, Enum):
    ACTIVE = "ACTIVE"
    EXERCISED = "EXERCISED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class VestingEventStatus(str, Enum):
    PENDING = "PENDING"
    VESTED = "VESTED"
    CANCELLED = "CANCELLED"


class TransactionType(str, Enum):
    EXERCISE = "EXERCISE"
    SALE = "SALE"
    GRANT = "GRANT"
    VEST = "VEST"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
