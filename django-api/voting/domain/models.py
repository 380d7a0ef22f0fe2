"""Domain models representing persisted state and computed results.

These are pure domain objects with no API input rules.
Django ORM models are in voting/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from voting.domain.value_objects import (
    ApplicationStatus,
    CompetitionId,
    CompetitionStatus,
    ContestantId,
    Money,
    NominationStatus,
    Percentage,
    SubmissionId,
    SubmissionKind,
    TierId,
    VoteSource,
    VoteWeight,
)


@dataclass(frozen=True)
class HostingTier:
    """Pricing and revenue-share contract a hosted competition is bound to."""

    id: TierId
    name: str
    price: Money
    max_contestants: int
    revenue_share: Percentage


@dataclass(frozen=True)
class VotePackage:
    name: str
    vote_count: int
    bonus_votes: int
    price: Money

    @property
    def total_votes(self) -> int:
        return self.vote_count + self.bonus_votes


DEFAULT_VOTE_PACKAGES = (
    VotePackage("Starter Pack", 500, 0, Money(1000)),
    VotePackage("Fan Pack", 1000, 300, Money(1500)),
    VotePackage("Super Fan Pack", 2000, 600, Money(3000)),
)


@dataclass(frozen=True)
class PlatformSettings:
    """Immutable snapshot of the admin-editable platform settings.

    Loaded once per request so a calculation never sees a half-applied edit.
    """

    sales_tax: Percentage = Percentage.of(0)
    free_votes_per_day: int = 5
    vote_price: Money = Money(100)
    platform_fee: Percentage = Percentage.of(0)
    vote_packages: tuple[VotePackage, ...] = DEFAULT_VOTE_PACKAGES
    join_open: bool = True
    join_fee: Money = Money(0)
    host_open: bool = True
    host_fee: Money = Money(0)
    nominations_enabled: bool = True
    nomination_fee: Money = Money(0)
    nonprofit_required: bool = False


@dataclass(frozen=True)
class Competition:
    """Domain representation of a Competition."""

    id: CompetitionId
    title: str
    category: str
    status: CompetitionStatus
    online_vote_weight: VoteWeight
    in_person_only: bool
    max_votes_per_day: int | None
    timezone: str
    created_at: datetime
    host_id: str | None = None
    tier: HostingTier | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    start_date_tbd: bool = False
    end_date_tbd: bool = False
    voting_starts_at: datetime | None = None
    voting_ends_at: datetime | None = None
    expected_contestants: int | None = None

    def daily_cap(self, settings: PlatformSettings) -> int:
        """Free votes a single voter may cast per day in this competition."""
        if self.max_votes_per_day is not None:
            return self.max_votes_per_day
        return settings.free_votes_per_day

    def voting_window_contains(self, moment: datetime) -> bool:
        if self.voting_starts_at is not None and moment < self.voting_starts_at:
            return False
        if self.voting_ends_at is not None and moment > self.voting_ends_at:
            return False
        return True


@dataclass(frozen=True)
class Contestant:
    """Domain representation of a contestant entry in one competition."""

    id: ContestantId
    competition_id: CompetitionId
    talent_profile_id: str
    display_name: str
    application_status: ApplicationStatus
    applied_at: datetime

    @property
    def can_receive_votes(self) -> bool:
        return self.application_status is ApplicationStatus.APPROVED


@dataclass(frozen=True)
class Vote:
    """Immutable vote event as appended to the ledger."""

    id: str
    competition_id: CompetitionId
    contestant_id: ContestantId
    source: VoteSource
    voter_identity: str
    cast_at: datetime
    voting_day: date
    replay_key: str | None = None
    transaction_id: str | None = None


@dataclass(frozen=True)
class Purchase:
    """Settled payment that credited purchased votes to a contestant."""

    transaction_id: str
    competition_id: CompetitionId
    contestant_id: ContestantId
    vote_count: int
    bonus_votes: int
    amount: Money
    purchased_at: datetime

    @property
    def total_votes(self) -> int:
        return self.vote_count + self.bonus_votes


@dataclass(frozen=True)
class ContestantTally:
    """Raw ledger counts for one contestant, split by source."""

    contestant_id: ContestantId
    free: int = 0
    purchased: int = 0
    in_person: int = 0

    @property
    def online(self) -> int:
        return self.free + self.purchased

    @property
    def total(self) -> int:
        return self.online + self.in_person


@dataclass(frozen=True)
class Person:
    """Contact details captured by intake forms."""

    full_name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class Submission:
    """Join application, host request or nomination."""

    id: SubmissionId
    kind: SubmissionKind
    applicant: Person
    status: ApplicationStatus
    amount_paid: Money
    created_at: datetime
    competition_id: CompetitionId | None = None
    transaction_id: str | None = None
    details: dict = field(default_factory=dict)
    nominator: Person | None = None
    nomination_status: NominationStatus | None = None
    chosen_nonprofit: str | None = None


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    used: int
    cap: int
    reason: str | None = None

    @property
    def remaining(self) -> int:
        return max(self.cap - self.used, 0)


@dataclass(frozen=True)
class VoteReceipt:
    """Outcome of a vote request as reported to the caller."""

    accepted: bool
    vote_id: str | None = None
    duplicate: bool = False
    reason: str | None = None


@dataclass(frozen=True)
class SettlementReceipt:
    accepted: bool
    votes_credited: int
    duplicate: bool = False


@dataclass(frozen=True)
class CheckoutReceipt:
    """A charged and credited vote purchase."""

    transaction_id: str
    package_name: str
    amount: Money
    votes_credited: int


@dataclass(frozen=True)
class VoteBreakdown:
    online: int
    in_person: int
    total: int
    online_vote_weight: int
    in_person_only: bool


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    contestant_id: ContestantId
    display_name: str
    online_votes: int
    in_person_votes: int
    weighted_votes: Decimal
    vote_percentage: Decimal


@dataclass(frozen=True)
class Leaderboard:
    competition_id: CompetitionId
    total_weighted_votes: Decimal
    entries: tuple[LeaderboardEntry, ...]


@dataclass(frozen=True)
class RevenueSplit:
    """Gross revenue carved into tax, host share and platform share."""

    gross: Money
    tax: Money
    net: Money
    host_share: Money
    platform_share: Money


@dataclass(frozen=True)
class RevenueReport:
    competition_id: CompetitionId
    total_votes: int
    total_purchased_votes: int
    total_purchases: int
    revenue_share_percent: Decimal
    split: RevenueSplit
