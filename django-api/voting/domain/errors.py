"""Domain error codes for the voting module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    COMPETITION_NOT_FOUND = "COMPETITION_NOT_FOUND"
    CONTESTANT_NOT_FOUND = "CONTESTANT_NOT_FOUND"
    SUBMISSION_NOT_FOUND = "SUBMISSION_NOT_FOUND"
    TIER_NOT_FOUND = "TIER_NOT_FOUND"
    INVALID_CONTESTANT = "INVALID_CONTESTANT"
    COMPETITION_CLOSED = "COMPETITION_CLOSED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    DUPLICATE_TRANSACTION = "DUPLICATE_TRANSACTION"
    ALREADY_APPLIED = "ALREADY_APPLIED"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    TIER_LOCKED = "TIER_LOCKED"
    TIER_CAPACITY_REACHED = "TIER_CAPACITY_REACHED"
    INTAKE_CLOSED = "INTAKE_CLOSED"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    SETTLEMENT_MISMATCH = "SETTLEMENT_MISMATCH"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when a request is missing required data or carries bad values."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "ID") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} format",
        )


class CompetitionNotFoundError(DomainError):
    """Raised when a competition is not found."""

    def __init__(self, competition_id: str) -> None:
        super().__init__(
            code=ErrorCode.COMPETITION_NOT_FOUND,
            message="Competition not found",
        )
        self.competition_id = competition_id


class ContestantNotFoundError(DomainError):
    """Raised when a contestant is not found."""

    def __init__(self, contestant_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONTESTANT_NOT_FOUND,
            message="Contestant not found",
        )
        self.contestant_id = contestant_id


class SubmissionNotFoundError(DomainError):
    """Raised when a submission is not found."""

    def __init__(self, submission_id: str) -> None:
        super().__init__(
            code=ErrorCode.SUBMISSION_NOT_FOUND,
            message="Submission not found",
        )
        self.submission_id = submission_id


class TierNotFoundError(DomainError):
    """Raised when a hosting tier is not found."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TIER_NOT_FOUND,
            message="Hosting package not found",
        )


class InvalidContestantError(DomainError):
    """Raised when a vote targets a contestant that cannot receive votes."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CONTESTANT,
            message="Contestant is not approved in this competition",
        )


class CompetitionClosedError(DomainError):
    """Raised when voting is not open for the requested channel."""

    def __init__(self, message: str = "Voting is not open for this competition") -> None:
        super().__init__(code=ErrorCode.COMPETITION_CLOSED, message=message)


class DuplicateTransactionError(DomainError):
    """Raised by stores when a transaction id was already settled."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_TRANSACTION,
            message="Transaction already settled",
        )
        self.transaction_id = transaction_id


class AlreadyAppliedError(DomainError):
    """Raised when a talent profile applies twice to one competition."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_APPLIED,
            message="Already applied to this competition",
        )


class InvalidStatusTransitionError(DomainError):
    """Raised when a status change is not allowed from the current state."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot move from {current} to {requested}",
        )


class TierLockedError(DomainError):
    """Raised when changing the tier of a competition that has sold votes."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TIER_LOCKED,
            message="Hosting package cannot change after votes have been sold",
        )


class TierCapacityReachedError(DomainError):
    """Raised when approving more contestants than the tier allows."""

    def __init__(self, max_contestants: int) -> None:
        super().__init__(
            code=ErrorCode.TIER_CAPACITY_REACHED,
            message=f"Hosting package allows {max_contestants} contestants",
        )


class IntakeClosedError(DomainError):
    """Raised when join, host or nomination intake is switched off."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INTAKE_CLOSED, message=message)


class PaymentRequiredError(DomainError):
    """Raised when a fee applies and no payment token was supplied."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_REQUIRED,
            message="Payment is required for this submission",
        )


class PaymentFailedError(DomainError):
    """Raised when the gateway refuses to exchange a token for a charge."""

    def __init__(self, gateway_message: str) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_FAILED,
            message=f"Payment failed: {gateway_message}",
        )


class SettlementMismatchError(DomainError):
    """Raised when purchased votes in the ledger disagree with purchases."""

    def __init__(self, ledger_count: int, purchased_count: int) -> None:
        super().__init__(
            code=ErrorCode.SETTLEMENT_MISMATCH,
            message="Purchased votes do not reconcile with purchases",
        )
        self.ledger_count = ledger_count
        self.purchased_count = purchased_count
