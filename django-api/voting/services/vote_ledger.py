"""Vote ledger service - the only way votes enter the system.

Free votes go through the QuotaEnforcer inside the same locked unit as the
append. Purchased votes are credited only by a settled purchase, keyed by
the payment transaction id. In-person votes skip the quota.
"""

import hashlib
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from uuid import uuid4

from voting.domain import (
    Competition,
    CompetitionStatus,
    Contestant,
    Money,
    PlatformSettings,
    Purchase,
    QuotaDecision,
    SettlementReceipt,
    Vote,
    VoteReceipt,
    VoteSource,
)
from voting.domain.errors import (
    CompetitionClosedError,
    DuplicateTransactionError,
    InvalidContestantError,
    ValidationError,
)
from voting.services.lookups import contestant_id as parse_contestant_id
from voting.services.lookups import require_competition, utcnow
from voting.services.quota_service import QuotaEnforcer, voting_day
from voting.stores.interfaces import CompetitionStore, VoteLedgerStore

logger = logging.getLogger(__name__)

DEFAULT_REPLAY_WINDOW_SECONDS = 2


def parse_source(raw: str | VoteSource) -> VoteSource:
    if isinstance(raw, VoteSource):
        return raw
    try:
        return VoteSource(raw)
    except ValueError:
        raise ValidationError(f"Unknown vote source: {raw}") from None


class VoteLedger:
    """Service for recording votes and crediting purchases."""

    def __init__(
        self,
        competitions: CompetitionStore,
        ledger: VoteLedgerStore,
        quota: QuotaEnforcer | None = None,
        clock: Callable[[], datetime] = utcnow,
        replay_window_seconds: int = DEFAULT_REPLAY_WINDOW_SECONDS,
    ) -> None:
        self._competitions = competitions
        self._ledger = ledger
        self._quota = quota or QuotaEnforcer(ledger)
        self._clock = clock
        self._replay_window = max(int(replay_window_seconds), 1)

    def record_vote(
        self,
        competition_id: str,
        contestant_id: str,
        source: str | VoteSource,
        voter_identity: str,
        settings: PlatformSettings,
        request_id: str | None = None,
    ) -> VoteReceipt:
        """Record a single free or in-person vote.

        Replayed free votes are acknowledged without a new event. Quota
        denials come back as a non-accepted receipt, never as an exception.

        Raises:
            InvalidIdError: If an id is not a valid UUID.
            CompetitionNotFoundError: If the competition does not exist.
            InvalidContestantError: If the contestant is not approved in it.
            CompetitionClosedError: If voting is not open for this source.
            ValidationError: For purchased sources or a blank voter identity.
        """
        source = parse_source(source)
        if source is VoteSource.ONLINE_PURCHASED:
            raise ValidationError("Purchased votes are credited through purchase settlement")
        if not voter_identity or not voter_identity.strip():
            raise ValidationError("Voter identity is required")

        competition = require_competition(self._competitions, competition_id)
        contestant = self._eligible_contestant(competition, contestant_id)
        now = self._clock()

        replay_key = None
        if source is VoteSource.ONLINE_FREE:
            replay_key = self._replay_key(
                competition, contestant, voter_identity, now, request_id
            )
            existing = self._ledger.find_replay(replay_key)
            if existing is not None:
                return self._replayed(existing)
        self._ensure_open(competition, source, now)

        vote = Vote(
            id=str(uuid4()),
            competition_id=competition.id,
            contestant_id=contestant.id,
            source=source,
            voter_identity=voter_identity,
            cast_at=now,
            voting_day=voting_day(competition, now),
        )

        if source is VoteSource.IN_PERSON_QR:
            self._ledger.append_vote(vote)
            return VoteReceipt(accepted=True, vote_id=vote.id)

        with self._quota.hold(competition, voter_identity, vote.voting_day) as counter:
            existing = self._ledger.find_replay(replay_key)
            if existing is not None:
                return self._replayed(existing)

            decision = self._quota.consume(counter, competition, settings, voter_identity)
            if not decision.allowed:
                return VoteReceipt(accepted=False, reason=decision.reason)

            self._ledger.append_vote(replace(vote, replay_key=replay_key))
        return VoteReceipt(accepted=True, vote_id=vote.id)

    def free_vote_status(
        self, competition_id: str, voter_identity: str, settings: PlatformSettings
    ) -> QuotaDecision:
        """Report today's free-vote usage for a voter without consuming any."""
        if not voter_identity or not voter_identity.strip():
            raise ValidationError("Voter identity is required")
        competition = require_competition(self._competitions, competition_id)
        day = voting_day(competition, self._clock())
        return self._quota.remaining(voter_identity, competition, day, settings)

    def credit_purchase(
        self,
        transaction_id: str,
        competition_id: str,
        contestant_id: str,
        vote_count: int,
        bonus_votes: int,
        amount_cents: int,
    ) -> SettlementReceipt:
        """Credit purchased votes for a settled payment.

        Safe to call repeatedly with the same transaction id: only the first
        call credits votes, later calls return a duplicate receipt. The money
        has already been captured, so a competition that closed in the
        meantime still gets the purchase on its books.
        """
        if not transaction_id or not transaction_id.strip():
            raise ValidationError("Transaction ID is required")
        if self._ledger.has_transaction(transaction_id):
            logger.info("Duplicate settlement ignored: transaction=%s", transaction_id)
            return SettlementReceipt(accepted=True, votes_credited=0, duplicate=True)

        if vote_count < 0 or bonus_votes < 0:
            raise ValidationError("Vote counts cannot be negative")
        if vote_count + bonus_votes == 0:
            raise ValidationError("A purchase must credit at least one vote")
        if amount_cents < 0:
            raise ValidationError("Amount cannot be negative")

        competition = require_competition(self._competitions, competition_id)
        contestant = self._eligible_contestant(competition, contestant_id)
        now = self._clock()

        purchase = Purchase(
            transaction_id=transaction_id,
            competition_id=competition.id,
            contestant_id=contestant.id,
            vote_count=vote_count,
            bonus_votes=bonus_votes,
            amount=Money(amount_cents),
            purchased_at=now,
        )
        try:
            self._ledger.credit_purchase(purchase, voting_day(competition, now))
        except DuplicateTransactionError:
            logger.info("Duplicate settlement ignored: transaction=%s", transaction_id)
            return SettlementReceipt(accepted=True, votes_credited=0, duplicate=True)

        logger.info(
            "Purchase settled: transaction=%s competition=%s votes=%d amount=%d",
            transaction_id,
            competition.id,
            purchase.total_votes,
            amount_cents,
        )
        return SettlementReceipt(accepted=True, votes_credited=purchase.total_votes)

    def check_purchasable(
        self, competition_id: str, contestant_id: str
    ) -> tuple[Competition, Contestant]:
        """Check that votes for the contestant can be sold right now.

        Raises:
            CompetitionNotFoundError: If the competition does not exist.
            InvalidContestantError: If the contestant is not approved in it.
            CompetitionClosedError: If online voting is not open.
        """
        competition = require_competition(self._competitions, competition_id)
        contestant = self._eligible_contestant(competition, contestant_id)
        self._ensure_open(competition, VoteSource.ONLINE_PURCHASED, self._clock())
        return competition, contestant

    @staticmethod
    def _replayed(vote_id: str) -> VoteReceipt:
        logger.info("Replayed free vote acknowledged: vote=%s", vote_id)
        return VoteReceipt(accepted=True, vote_id=vote_id, duplicate=True)

    def _eligible_contestant(self, competition: Competition, raw_id: str) -> Contestant:
        contestant = self._competitions.get_contestant(parse_contestant_id(raw_id))
        if (
            contestant is None
            or contestant.competition_id != competition.id
            or not contestant.can_receive_votes
        ):
            raise InvalidContestantError()
        return contestant

    @staticmethod
    def _ensure_open(competition: Competition, source: VoteSource, now: datetime) -> None:
        if competition.status is not CompetitionStatus.ACTIVE:
            raise CompetitionClosedError()
        if not competition.voting_window_contains(now):
            raise CompetitionClosedError("Voting window is closed")
        if source.is_online and competition.in_person_only:
            raise CompetitionClosedError("This competition accepts in-person votes only")

    def _replay_key(
        self,
        competition: Competition,
        contestant: Contestant,
        voter_identity: str,
        now: datetime,
        request_id: str | None,
    ) -> str:
        bucket = request_id or f"t{int(now.timestamp()) // self._replay_window}"
        raw = f"{competition.id}|{contestant.id}|{voter_identity}|{bucket}"
        return hashlib.sha256(raw.encode()).hexdigest()
