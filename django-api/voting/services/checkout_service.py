"""Vote checkout - price, charge, then credit.

Nothing is charged unless votes can be sold at that moment, and votes are
credited only with the transaction id the gateway confirmed.
"""

import logging

from voting.domain import (
    CheckoutReceipt,
    Money,
    Person,
    PlatformSettings,
    VotePackage,
)
from voting.domain.errors import DomainError, PaymentFailedError, ValidationError
from voting.services.payments import PaymentGateway, PaymentToken
from voting.services.vote_ledger import VoteLedger

logger = logging.getLogger(__name__)

CUSTOM_PACKAGE_NAME = "Custom"


def select_package(
    settings: PlatformSettings,
    package_index: int | None = None,
    vote_count: int | None = None,
) -> VotePackage:
    """Resolve a catalogue package, or price a custom count at the vote price."""
    if (package_index is None) == (vote_count is None):
        raise ValidationError("Choose either a vote package or a vote count")
    if package_index is not None:
        if not 0 <= package_index < len(settings.vote_packages):
            raise ValidationError("Vote package not found")
        return settings.vote_packages[package_index]
    if vote_count < 1:
        raise ValidationError("Vote count must be at least 1")
    return VotePackage(
        name=CUSTOM_PACKAGE_NAME,
        vote_count=vote_count,
        bonus_votes=0,
        price=Money(settings.vote_price.cents * vote_count),
    )


class VoteCheckout:
    """Service selling votes against a payment token."""

    def __init__(self, ledger: VoteLedger, gateway: PaymentGateway) -> None:
        self._ledger = ledger
        self._gateway = gateway

    def checkout(
        self,
        competition_id: str,
        contestant_id: str,
        buyer: Person,
        payment_token: PaymentToken,
        settings: PlatformSettings,
        package_index: int | None = None,
        vote_count: int | None = None,
    ) -> CheckoutReceipt:
        """Charge the buyer for a package and credit its votes.

        Raises:
            ValidationError: If the package choice is missing or unknown.
            CompetitionNotFoundError: If the competition does not exist.
            InvalidContestantError: If the contestant is not approved in it.
            CompetitionClosedError: If online voting is not open.
            PaymentFailedError: If the gateway declines. Nothing is credited.
        """
        package = select_package(settings, package_index, vote_count)
        competition, contestant = self._ledger.check_purchasable(
            competition_id, contestant_id
        )
        if package.price.cents == 0:
            raise ValidationError("Vote package has no price")

        try:
            confirmation = self._gateway.charge(
                payment_token,
                package.price,
                f"{package.total_votes} votes for {competition.title}",
                email=buyer.email,
                name=buyer.full_name,
            )
        except PaymentFailedError as exc:
            logger.warning("Vote checkout payment failed: %s", exc.message)
            raise

        try:
            receipt = self._ledger.credit_purchase(
                confirmation.transaction_id,
                str(competition.id),
                str(contestant.id),
                package.vote_count,
                package.bonus_votes,
                confirmation.amount.cents,
            )
        except DomainError:
            logger.error(
                "Charged but not credited: transaction=%s competition=%s contestant=%s",
                confirmation.transaction_id,
                competition.id,
                contestant.id,
            )
            raise

        return CheckoutReceipt(
            transaction_id=confirmation.transaction_id,
            package_name=package.name,
            amount=confirmation.amount,
            votes_credited=receipt.votes_credited,
        )
