"""ID parsing and existence checks shared by the services."""

from datetime import datetime, timezone

from voting.domain import (
    Competition,
    CompetitionId,
    Contestant,
    ContestantId,
    SubmissionId,
    TierId,
)
from voting.domain.errors import (
    CompetitionNotFoundError,
    ContestantNotFoundError,
    InvalidIdError,
)
from voting.stores.interfaces import CompetitionStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_id(id_type, raw, kind: str):
    """Parse ``raw`` into ``id_type`` or raise InvalidIdError."""
    if isinstance(raw, id_type):
        return raw
    try:
        return id_type.from_string(str(raw))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(kind) from None


def competition_id(raw) -> CompetitionId:
    return parse_id(CompetitionId, raw, "competition ID")


def contestant_id(raw) -> ContestantId:
    return parse_id(ContestantId, raw, "contestant ID")


def submission_id(raw) -> SubmissionId:
    return parse_id(SubmissionId, raw, "submission ID")


def tier_id(raw) -> TierId:
    return parse_id(TierId, raw, "hosting package ID")


def require_competition(store: CompetitionStore, raw) -> Competition:
    """Return the competition or raise.

    Raises:
        InvalidIdError: If ``raw`` is not a valid UUID.
        CompetitionNotFoundError: If the competition does not exist.
    """
    parsed = competition_id(raw)
    competition = store.get_competition(parsed)
    if competition is None:
        raise CompetitionNotFoundError(str(parsed))
    return competition


def require_contestant(store: CompetitionStore, raw) -> Contestant:
    parsed = contestant_id(raw)
    contestant = store.get_contestant(parsed)
    if contestant is None:
        raise ContestantNotFoundError(str(parsed))
    return contestant
