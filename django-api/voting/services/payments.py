"""Payment gateway collaborator.

The engine never sees card data. A client obtains an opaque token from the
gateway and the engine asks the gateway to exchange it for a charge.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from voting.domain import Money
from voting.domain.errors import PaymentFailedError


@dataclass(frozen=True)
class PaymentToken:
    """Opaque token produced by the gateway's client-side tokenizer."""

    descriptor: str
    value: str


@dataclass(frozen=True)
class ChargeConfirmation:
    transaction_id: str
    amount: Money


class PaymentGateway(ABC):
    """Interface for exchanging payment tokens for charges."""

    @abstractmethod
    def charge(
        self,
        token: PaymentToken,
        amount: Money,
        description: str,
        email: str | None = None,
        name: str | None = None,
    ) -> ChargeConfirmation:
        """Capture ``amount`` against ``token``.

        Raises:
            PaymentFailedError: With the gateway's message when the charge
                is declined, times out or is cancelled.
        """
        ...


class UnconfiguredGateway(PaymentGateway):
    """Gateway used when no real gateway is configured; declines everything."""

    def charge(
        self,
        token: PaymentToken,
        amount: Money,
        description: str,
        email: str | None = None,
        name: str | None = None,
    ) -> ChargeConfirmation:
        raise PaymentFailedError("Payment gateway is not configured")
