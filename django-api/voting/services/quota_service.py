"""Daily free-vote quota enforcement.

Only ``online_free`` votes pass through here. Purchased and in-person votes
are never capped.
"""

import logging
from contextlib import AbstractContextManager
from datetime import date, datetime
from zoneinfo import ZoneInfo

from voting.domain import Competition, PlatformSettings, QuotaDecision
from voting.domain.errors import ErrorCode
from voting.stores.interfaces import QuotaCounter, VoteLedgerStore

logger = logging.getLogger(__name__)


def voting_day(competition: Competition, moment: datetime) -> date:
    """Calendar day of ``moment`` in the competition's timezone."""
    return moment.astimezone(ZoneInfo(competition.timezone)).date()


class QuotaEnforcer:
    """Gatekeeper for free votes."""

    def __init__(self, store: VoteLedgerStore) -> None:
        self._store = store

    def hold(
        self, competition: Competition, voter_identity: str, day: date
    ) -> AbstractContextManager[QuotaCounter]:
        """Lock the (voter, competition, day) key for a check-and-append unit."""
        return self._store.locked_quota(competition.id, voter_identity, day)

    def consume(
        self,
        counter: QuotaCounter,
        competition: Competition,
        settings: PlatformSettings,
        voter_identity: str,
    ) -> QuotaDecision:
        """Take one free vote from a held counter, or deny if the cap is reached.

        Must be called inside ``hold`` for the same key.
        """
        cap = competition.daily_cap(settings)
        if counter.used >= cap:
            logger.info(
                "Free vote denied: voter=%s competition=%s used=%d cap=%d",
                voter_identity,
                competition.id,
                counter.used,
                cap,
            )
            return QuotaDecision(
                allowed=False,
                used=counter.used,
                cap=cap,
                reason=ErrorCode.QUOTA_EXCEEDED.value,
            )
        counter.used += 1
        return QuotaDecision(allowed=True, used=counter.used, cap=cap)

    def check_and_consume(
        self,
        voter_identity: str,
        competition: Competition,
        day: date,
        settings: PlatformSettings,
    ) -> QuotaDecision:
        with self.hold(competition, voter_identity, day) as counter:
            return self.consume(counter, competition, settings, voter_identity)

    def remaining(
        self,
        voter_identity: str,
        competition: Competition,
        day: date,
        settings: PlatformSettings,
    ) -> QuotaDecision:
        """Report usage without consuming anything."""
        used = self._store.quota_used(competition.id, voter_identity, day)
        cap = competition.daily_cap(settings)
        return QuotaDecision(allowed=used < cap, used=used, cap=cap)
