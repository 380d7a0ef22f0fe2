"""Revenue settlement service."""

import logging
from decimal import Decimal

from voting.domain import PlatformSettings, RevenueReport
from voting.domain.errors import SettlementMismatchError
from voting.domain.settlement import gross_revenue, purchased_vote_total, split_revenue
from voting.services.lookups import require_competition
from voting.stores.interfaces import CompetitionStore, VoteLedgerStore

logger = logging.getLogger(__name__)


class SettlementService:
    """Service reconciling purchases into a revenue split."""

    def __init__(self, competitions: CompetitionStore, ledger: VoteLedgerStore) -> None:
        self._competitions = competitions
        self._ledger = ledger

    def revenue_report(
        self, competition_id: str, settings: PlatformSettings
    ) -> RevenueReport:
        """Return revenue totals and the tax/host/platform split.

        Raises:
            InvalidIdError: If the competition_id is not a valid UUID.
            CompetitionNotFoundError: If the competition does not exist.
            SettlementMismatchError: If purchased votes in the ledger do not
                match the settled purchases. Requires manual reconciliation.
        """
        competition = require_competition(self._competitions, competition_id)
        purchases = self._ledger.list_purchases(competition.id)
        tallies = self._ledger.tallies(competition.id).values()

        ledger_purchased = sum(t.purchased for t in tallies)
        purchased = purchased_vote_total(purchases)
        if ledger_purchased != purchased:
            logger.critical(
                "Settlement mismatch: competition=%s ledger_purchased=%d purchases=%d",
                competition.id,
                ledger_purchased,
                purchased,
            )
            raise SettlementMismatchError(ledger_purchased, purchased)

        tier = competition.tier
        return RevenueReport(
            competition_id=competition.id,
            total_votes=sum(t.total for t in tallies),
            total_purchased_votes=purchased,
            total_purchases=len(purchases),
            revenue_share_percent=tier.revenue_share.value if tier else Decimal("0"),
            split=split_revenue(gross_revenue(purchases), settings, tier),
        )
