"""In-memory implementation of all stores.

Thread safe. Used for service tests and local experiments; the Django ORM
store is the production implementation.
"""

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Iterator
from uuid import uuid4

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
    VoteSource,
)
from voting.domain.errors import DuplicateTransactionError
from voting.stores.interfaces import (
    CompetitionStore,
    QuotaCounter,
    SettingsStore,
    SubmissionStore,
    VoteLedgerStore,
)

QuotaKey = tuple[CompetitionId, str, date]


class InMemoryStore(CompetitionStore, VoteLedgerStore, SettingsStore, SubmissionStore):
    """Dict-backed store implementing every store interface."""

    def __init__(
        self,
        tiers: list[HostingTier] | None = None,
        settings: PlatformSettings | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._competitions: dict[CompetitionId, Competition] = {}
        self._tiers: dict[TierId, HostingTier] = {t.id: t for t in tiers or []}
        self._contestants: dict[ContestantId, Contestant] = {}
        self._votes: list[Vote] = []
        self._replays: dict[str, str] = {}
        self._purchases: dict[str, Purchase] = {}
        self._quota: dict[QuotaKey, int] = {}
        self._quota_locks: dict[QuotaKey, threading.Lock] = {}
        self._quota_lock_users: dict[QuotaKey, int] = {}
        self._settings = settings or PlatformSettings()
        self._submissions: dict[SubmissionId, Submission] = {}

    # Competitions

    def get_competition(self, competition_id: CompetitionId) -> Competition | None:
        return self._competitions.get(competition_id)

    def save_competition(self, competition: Competition) -> None:
        with self._lock:
            self._competitions[competition.id] = competition

    def delete_competition(self, competition_id: CompetitionId) -> bool:
        with self._lock:
            if self._competitions.pop(competition_id, None) is None:
                return False
            self._contestants = {
                k: c for k, c in self._contestants.items()
                if c.competition_id != competition_id
            }
            self._votes = [v for v in self._votes if v.competition_id != competition_id]
            self._replays = {
                v.replay_key: v.id for v in self._votes if v.replay_key is not None
            }
            self._purchases = {
                k: p for k, p in self._purchases.items()
                if p.competition_id != competition_id
            }
            self._quota = {k: n for k, n in self._quota.items() if k[0] != competition_id}
            return True

    def list_tiers(self) -> list[HostingTier]:
        return sorted(self._tiers.values(), key=lambda t: t.price.cents)

    def get_tier(self, tier_id: TierId) -> HostingTier | None:
        return self._tiers.get(tier_id)

    def get_contestant(self, contestant_id: ContestantId) -> Contestant | None:
        return self._contestants.get(contestant_id)

    def find_contestant(
        self, competition_id: CompetitionId, talent_profile_id: str
    ) -> Contestant | None:
        for contestant in self._contestants.values():
            if (
                contestant.competition_id == competition_id
                and contestant.talent_profile_id == talent_profile_id
            ):
                return contestant
        return None

    def list_contestants(self, competition_id: CompetitionId) -> list[Contestant]:
        found = [c for c in self._contestants.values() if c.competition_id == competition_id]
        return sorted(found, key=lambda c: c.applied_at)

    def save_contestant(self, contestant: Contestant) -> None:
        with self._lock:
            self._contestants[contestant.id] = contestant

    # Ledger

    @contextmanager
    def locked_quota(
        self, competition_id: CompetitionId, voter_identity: str, day: date
    ) -> Iterator[QuotaCounter]:
        key = (competition_id, voter_identity, day)
        with self._lock:
            key_lock = self._quota_locks.setdefault(key, threading.Lock())
            self._quota_lock_users[key] = self._quota_lock_users.get(key, 0) + 1
        try:
            with key_lock:
                counter = QuotaCounter(used=self._quota.get(key, 0))
                yield counter
                self._quota[key] = counter.used
        finally:
            # Drop the lock once nobody holds or waits on it.
            with self._lock:
                self._quota_lock_users[key] -= 1
                if not self._quota_lock_users[key]:
                    del self._quota_lock_users[key]
                    del self._quota_locks[key]

    def held_quota_locks(self) -> int:
        return len(self._quota_locks)

    def quota_used(
        self, competition_id: CompetitionId, voter_identity: str, day: date
    ) -> int:
        return self._quota.get((competition_id, voter_identity, day), 0)

    def find_replay(self, replay_key: str) -> str | None:
        return self._replays.get(replay_key)

    def append_vote(self, vote: Vote) -> None:
        with self._lock:
            if vote.replay_key is not None:
                self._replays[vote.replay_key] = vote.id
            self._votes.append(vote)

    def has_transaction(self, transaction_id: str) -> bool:
        return transaction_id in self._purchases

    def credit_purchase(self, purchase: Purchase, voting_day: date) -> None:
        with self._lock:
            if purchase.transaction_id in self._purchases:
                raise DuplicateTransactionError(purchase.transaction_id)
            self._purchases[purchase.transaction_id] = purchase
            self._votes.extend(
                Vote(
                    id=str(uuid4()),
                    competition_id=purchase.competition_id,
                    contestant_id=purchase.contestant_id,
                    source=VoteSource.ONLINE_PURCHASED,
                    voter_identity=f"purchase:{purchase.transaction_id}",
                    cast_at=purchase.purchased_at,
                    voting_day=voting_day,
                    transaction_id=purchase.transaction_id,
                )
                for _ in range(purchase.total_votes)
            )

    def tallies(self, competition_id: CompetitionId) -> dict[ContestantId, ContestantTally]:
        counts: dict[ContestantId, ContestantTally] = {}
        with self._lock:
            votes = [v for v in self._votes if v.competition_id == competition_id]
        for vote in votes:
            tally = counts.get(vote.contestant_id) or ContestantTally(vote.contestant_id)
            if vote.source is VoteSource.ONLINE_FREE:
                tally = replace(tally, free=tally.free + 1)
            elif vote.source is VoteSource.ONLINE_PURCHASED:
                tally = replace(tally, purchased=tally.purchased + 1)
            else:
                tally = replace(tally, in_person=tally.in_person + 1)
            counts[vote.contestant_id] = tally
        return counts

    def list_purchases(self, competition_id: CompetitionId) -> list[Purchase]:
        found = [p for p in self._purchases.values() if p.competition_id == competition_id]
        return sorted(found, key=lambda p: p.purchased_at)

    def votes(self) -> list[Vote]:
        """Return a copy of every recorded vote."""
        with self._lock:
            return list(self._votes)

    # Settings

    def load_settings(self) -> PlatformSettings:
        return self._settings

    def save_settings(self, settings: PlatformSettings) -> None:
        self._settings = settings

    # Submissions

    def add_submission(self, submission: Submission) -> None:
        with self._lock:
            self._submissions[submission.id] = submission

    def save_submission(self, submission: Submission) -> None:
        with self._lock:
            self._submissions[submission.id] = submission

    def get_submission(self, submission_id: SubmissionId) -> Submission | None:
        return self._submissions.get(submission_id)

    def list_submissions(self, kind: SubmissionKind | None = None) -> list[Submission]:
        found = [s for s in self._submissions.values() if kind is None or s.kind is kind]
        return sorted(found, key=lambda s: s.created_at, reverse=True)
