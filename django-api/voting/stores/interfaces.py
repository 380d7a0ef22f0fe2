"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date

from voting.domain import (
    Competition,
    CompetitionId,
    Contestant,
    ContestantId,
    ContestantTally,
    HostingTier,
    PlatformSettings,
    Purchase,
    Submission,
    SubmissionId,
    SubmissionKind,
    TierId,
    Vote,
)


@dataclass
class QuotaCounter:
    """Free votes used by one voter in one competition on one day.

    Handed out by ``VoteLedgerStore.locked_quota`` while the key is locked.
    Changes to ``used`` persist only if the locked block exits cleanly.
    """

    used: int = 0


class CompetitionStore(ABC):
    """Interface for competition, contestant and tier persistence."""

    @abstractmethod
    def get_competition(self, competition_id: CompetitionId) -> Competition | None:
        """Return a competition by ID, or None if not found."""
        ...

    @abstractmethod
    def save_competition(self, competition: Competition) -> None:
        """Insert or update a competition."""
        ...

    @abstractmethod
    def delete_competition(self, competition_id: CompetitionId) -> bool:
        """Delete a competition with its contestants, votes and purchases.

        Returns False if the competition did not exist.
        """
        ...

    @abstractmethod
    def list_tiers(self) -> list[HostingTier]:
        """Return hosting tiers ordered by price ascending."""
        ...

    @abstractmethod
    def get_tier(self, tier_id: TierId) -> HostingTier | None:
        ...

    @abstractmethod
    def get_contestant(self, contestant_id: ContestantId) -> Contestant | None:
        ...

    @abstractmethod
    def find_contestant(
        self, competition_id: CompetitionId, talent_profile_id: str
    ) -> Contestant | None:
        """Return the entry of a talent profile in a competition, if any."""
        ...

    @abstractmethod
    def list_contestants(self, competition_id: CompetitionId) -> list[Contestant]:
        """Return all contestants of a competition ordered by applied_at."""
        ...

    @abstractmethod
    def save_contestant(self, contestant: Contestant) -> None:
        """Insert or update a contestant."""
        ...


class VoteLedgerStore(ABC):
    """Interface for the append-only vote ledger and settled purchases."""

    @abstractmethod
    def locked_quota(
        self, competition_id: CompetitionId, voter_identity: str, day: date
    ) -> AbstractContextManager[QuotaCounter]:
        """Lock the quota key and yield its counter.

        Everything done inside the block (quota changes and appended votes)
        forms one atomic unit per key.
        """
        ...

    @abstractmethod
    def quota_used(
        self, competition_id: CompetitionId, voter_identity: str, day: date
    ) -> int:
        ...

    @abstractmethod
    def find_replay(self, replay_key: str) -> str | None:
        """Return the vote ID recorded under a replay key, if any."""
        ...

    @abstractmethod
    def append_vote(self, vote: Vote) -> None:
        ...

    @abstractmethod
    def has_transaction(self, transaction_id: str) -> bool:
        ...

    @abstractmethod
    def credit_purchase(self, purchase: Purchase, voting_day: date) -> None:
        """Persist a purchase and its purchased vote events atomically.

        Raises:
            DuplicateTransactionError: If the transaction id was already settled.
        """
        ...

    @abstractmethod
    def tallies(self, competition_id: CompetitionId) -> dict[ContestantId, ContestantTally]:
        """Return raw vote counts per contestant, split by source."""
        ...

    @abstractmethod
    def list_purchases(self, competition_id: CompetitionId) -> list[Purchase]:
        """Return purchases for a competition ordered by purchased_at."""
        ...


class SettingsStore(ABC):
    """Interface for the platform settings singleton."""

    @abstractmethod
    def load_settings(self) -> PlatformSettings:
        """Return the current settings, or defaults if never saved."""
        ...

    @abstractmethod
    def save_settings(self, settings: PlatformSettings) -> None:
        ...


class SubmissionStore(ABC):
    """Interface for join, host and nomination submissions."""

    @abstractmethod
    def add_submission(self, submission: Submission) -> None:
        ...

    @abstractmethod
    def save_submission(self, submission: Submission) -> None:
        ...

    @abstractmethod
    def get_submission(self, submission_id: SubmissionId) -> Submission | None:
        ...

    @abstractmethod
    def list_submissions(self, kind: SubmissionKind | None = None) -> list[Submission]:
        """Return submissions newest first, optionally of one kind."""
        ...
