"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self
from uuid import UUID

CENT = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CompetitionId:
    """Unique identifier for a Competition."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContestantId:
    """Unique identifier for a Contestant entry."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SubmissionId:
    """Unique identifier for a join, host or nomination submission."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TierId:
    """Unique identifier for a HostingTier."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Amount in integer cents."""

    cents: int

    def __post_init__(self) -> None:
        if self.cents < 0:
            raise ValueError("Money amount cannot be negative")

    def percent(self, percent: "Percentage") -> "Money":
        """Return ``percent`` of this amount, rounded half up to the cent."""
        share = Decimal(self.cents) * percent.value / HUNDRED
        return Money(int(share.quantize(CENT, rounding=ROUND_HALF_UP)))

    def __add__(self, other: "Money") -> "Money":
        return Money(self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        return Money(self.cents - other.cents)

    def __str__(self) -> str:
        return f"{Decimal(self.cents) / HUNDRED:.2f}"


@dataclass(frozen=True)
class Percentage:
    """Percentage between 0 and 100 inclusive."""

    value: Decimal

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.value <= HUNDRED:
            raise ValueError("Percentage must be between 0 and 100")

    @classmethod
    def of(cls, value: int | str | Decimal) -> Self:
        return cls(value=Decimal(str(value)))


@dataclass(frozen=True)
class VoteWeight:
    """Integer percent applied to online votes when ranking (1..100)."""

    value: int = 100

    def __post_init__(self) -> None:
        if not 1 <= self.value <= 100:
            raise ValueError("Online vote weight must be between 1 and 100")

    def apply(self, count: int) -> Decimal:
        return Decimal(count) * Decimal(self.value) / HUNDRED


class CompetitionStatus(Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class VoteSource(Enum):
    ONLINE_FREE = "online_free"
    ONLINE_PURCHASED = "online_purchased"
    IN_PERSON_QR = "in_person_qr"

    @property
    def is_online(self) -> bool:
        return self is not VoteSource.IN_PERSON_QR


class ApplicationStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NominationStatus(Enum):
    PENDING = "pending"
    JOINED = "joined"
    UNSURE = "unsure"
    NOT_INTERESTED = "not_interested"


class SubmissionKind(Enum):
    APPLICATION = "application"
    HOST = "host"
    NOMINATION = "nomination"
