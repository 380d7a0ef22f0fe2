"""Competition and contestant administration."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from uuid import uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from voting.domain import (
    ApplicationStatus,
    Competition,
    CompetitionId,
    CompetitionStatus,
    Contestant,
    ContestantId,
    HostingTier,
    VoteWeight,
)
from voting.domain.errors import (
    AlreadyAppliedError,
    CompetitionNotFoundError,
    InvalidStatusTransitionError,
    TierCapacityReachedError,
    TierLockedError,
    TierNotFoundError,
    ValidationError,
)
from voting.services.lookups import (
    competition_id as parse_competition_id,
    require_competition,
    require_contestant,
    tier_id as parse_tier_id,
    utcnow,
)
from voting.stores.interfaces import CompetitionStore, VoteLedgerStore

logger = logging.getLogger(__name__)

COMPETITION_TRANSITIONS = {
    CompetitionStatus.DRAFT: {CompetitionStatus.ACTIVE, CompetitionStatus.COMPLETED},
    CompetitionStatus.ACTIVE: {CompetitionStatus.COMPLETED},
    CompetitionStatus.COMPLETED: set(),
}


def _weight(value: int) -> VoteWeight:
    try:
        return VoteWeight(int(value))
    except (TypeError, ValueError):
        raise ValidationError("Online vote weight must be between 1 and 100") from None


def _timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name}") from None
    return name


def _daily_cap(value: int | None) -> int | None:
    if value is not None and value < 1:
        raise ValidationError("Daily vote limit must be at least 1")
    return value


class CompetitionService:
    """Service for competition lifecycle and hosting tiers."""

    def __init__(
        self,
        store: CompetitionStore,
        ledger: VoteLedgerStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._clock = clock

    def list_tiers(self) -> list[HostingTier]:
        return self._store.list_tiers()

    def get_competition(self, competition_id: str) -> Competition:
        return require_competition(self._store, competition_id)

    def create_competition(
        self,
        title: str,
        category: str,
        host_id: str | None = None,
        tier_id: str | None = None,
        max_votes_per_day: int | None = None,
        online_vote_weight: int = 100,
        in_person_only: bool = False,
        timezone: str = "UTC",
        starts_at: datetime | None = None,
        ends_at: datetime | None = None,
        start_date_tbd: bool = False,
        end_date_tbd: bool = False,
        voting_starts_at: datetime | None = None,
        voting_ends_at: datetime | None = None,
        expected_contestants: int | None = None,
    ) -> Competition:
        """Create a draft competition bound to a hosting tier.

        Raises:
            ValidationError: For blank titles, bad weights, caps or timezones.
            TierNotFoundError: If tier_id does not name a hosting package.
        """
        if not title or not title.strip():
            raise ValidationError("Title is required")
        if not category or not category.strip():
            raise ValidationError("Category is required")
        if voting_starts_at and voting_ends_at and voting_ends_at <= voting_starts_at:
            raise ValidationError("Voting must end after it starts")

        competition = Competition(
            id=CompetitionId(uuid4()),
            title=title.strip(),
            category=category.strip(),
            status=CompetitionStatus.DRAFT,
            online_vote_weight=_weight(online_vote_weight),
            in_person_only=in_person_only,
            max_votes_per_day=_daily_cap(max_votes_per_day),
            timezone=_timezone(timezone),
            created_at=self._clock(),
            host_id=host_id,
            tier=self._resolve_tier(tier_id) if tier_id else None,
            starts_at=None if start_date_tbd else starts_at,
            ends_at=None if end_date_tbd else ends_at,
            start_date_tbd=start_date_tbd,
            end_date_tbd=end_date_tbd,
            voting_starts_at=voting_starts_at,
            voting_ends_at=voting_ends_at,
            expected_contestants=expected_contestants,
        )
        self._store.save_competition(competition)
        logger.info("Competition created: id=%s tier=%s", competition.id, tier_id)
        return competition

    def update_status(self, competition_id: str, status: str) -> Competition:
        competition = require_competition(self._store, competition_id)
        try:
            requested = CompetitionStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown competition status: {status}") from None
        if requested not in COMPETITION_TRANSITIONS[competition.status]:
            raise InvalidStatusTransitionError(competition.status.value, requested.value)
        updated = replace(competition, status=requested)
        self._store.save_competition(updated)
        return updated

    def change_tier(self, competition_id: str, tier_id: str) -> Competition:
        """Rebind a competition to another hosting tier.

        Raises:
            TierLockedError: If any votes have been sold in the competition.
        """
        competition = require_competition(self._store, competition_id)
        if self._ledger.list_purchases(competition.id):
            raise TierLockedError()
        updated = replace(competition, tier=self._resolve_tier(tier_id))
        self._store.save_competition(updated)
        return updated

    def update_voting_rules(
        self,
        competition_id: str,
        max_votes_per_day: int | None = None,
        online_vote_weight: int | None = None,
        in_person_only: bool | None = None,
        clear_daily_cap: bool = False,
    ) -> Competition:
        """Change quota and weighting rules. Omitted values are left as they are."""
        competition = require_competition(self._store, competition_id)
        changes = {}
        if clear_daily_cap:
            changes["max_votes_per_day"] = None
        elif max_votes_per_day is not None:
            changes["max_votes_per_day"] = _daily_cap(max_votes_per_day)
        if online_vote_weight is not None:
            changes["online_vote_weight"] = _weight(online_vote_weight)
        if in_person_only is not None:
            changes["in_person_only"] = in_person_only
        updated = replace(competition, **changes)
        self._store.save_competition(updated)
        return updated

    def delete_competition(self, competition_id: str) -> None:
        """Delete a competition and everything recorded against it."""
        parsed = parse_competition_id(competition_id)
        if not self._store.delete_competition(parsed):
            raise CompetitionNotFoundError(str(parsed))
        logger.warning("Competition deleted with its votes and purchases: id=%s", parsed)

    def _resolve_tier(self, raw_tier_id: str) -> HostingTier:
        tier = self._store.get_tier(parse_tier_id(raw_tier_id))
        if tier is None:
            raise TierNotFoundError()
        return tier


class ContestantService:
    """Service for contestant entries and their approval."""

    def __init__(
        self, store: CompetitionStore, clock: Callable[[], datetime] = utcnow
    ) -> None:
        self._store = store
        self._clock = clock

    def apply(
        self, competition_id: str, talent_profile_id: str, display_name: str
    ) -> Contestant:
        """Enter a talent profile into a competition as a pending contestant."""
        return self._enter(
            competition_id, talent_profile_id, display_name, ApplicationStatus.PENDING
        )

    def assign(
        self, competition_id: str, talent_profile_id: str, display_name: str
    ) -> Contestant:
        """Admin shortcut that enters a talent profile already approved."""
        return self._enter(
            competition_id, talent_profile_id, display_name, ApplicationStatus.APPROVED
        )

    def list_contestants(self, competition_id: str) -> list[Contestant]:
        competition = require_competition(self._store, competition_id)
        return self._store.list_contestants(competition.id)

    def set_application_status(self, contestant_id: str, status: str) -> Contestant:
        """Approve or reject a pending contestant.

        Decisions are final: an approved contestant may already hold votes,
        and the leaderboard must keep counting them.
        """
        contestant = require_contestant(self._store, contestant_id)
        try:
            requested = ApplicationStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown application status: {status}") from None
        current = contestant.application_status
        if current is not ApplicationStatus.PENDING or requested is ApplicationStatus.PENDING:
            raise InvalidStatusTransitionError(current.value, requested.value)
        if requested is ApplicationStatus.APPROVED:
            competition = require_competition(self._store, contestant.competition_id)
            self._check_capacity(competition)
        updated = replace(contestant, application_status=requested)
        self._store.save_contestant(updated)
        logger.info("Contestant %s is now %s", contestant.id, requested.value)
        return updated

    def _enter(
        self,
        competition_id: str,
        talent_profile_id: str,
        display_name: str,
        status: ApplicationStatus,
    ) -> Contestant:
        if not talent_profile_id or not display_name or not display_name.strip():
            raise ValidationError("Talent profile and display name are required")
        competition = require_competition(self._store, competition_id)
        if self._store.find_contestant(competition.id, talent_profile_id):
            raise AlreadyAppliedError()
        if status is ApplicationStatus.APPROVED:
            self._check_capacity(competition)
        contestant = Contestant(
            id=ContestantId(uuid4()),
            competition_id=competition.id,
            talent_profile_id=talent_profile_id,
            display_name=display_name.strip(),
            application_status=status,
            applied_at=self._clock(),
        )
        self._store.save_contestant(contestant)
        return contestant

    def _check_capacity(self, competition: Competition) -> None:
        if competition.tier is None:
            return
        approved = sum(
            1 for c in self._store.list_contestants(competition.id) if c.can_receive_votes
        )
        if approved >= competition.tier.max_contestants:
            raise TierCapacityReachedError(competition.tier.max_contestants)
