"""Revenue settlement arithmetic.

All amounts are integer cents. Tax is carved out of gross revenue, the host
receives the tier's share of what remains, and the platform keeps the
difference so nothing is lost to rounding.
"""

from voting.domain.models import HostingTier, PlatformSettings, Purchase, RevenueSplit
from voting.domain.value_objects import Money, Percentage

NO_SHARE = Percentage.of(0)


def split_revenue(
    gross: Money, settings: PlatformSettings, tier: HostingTier | None
) -> RevenueSplit:
    """Split ``gross`` into tax, host share and platform share.

    ``settings.platform_fee`` is deliberately not applied: the tier's revenue
    share is the only input to the host/platform split. Competitions without
    a tier have no host to pay.
    """
    tax = gross.percent(settings.sales_tax)
    net = gross - tax
    host_share = net.percent(tier.revenue_share if tier else NO_SHARE)
    return RevenueSplit(
        gross=gross,
        tax=tax,
        net=net,
        host_share=host_share,
        platform_share=net - host_share,
    )


def gross_revenue(purchases: list[Purchase]) -> Money:
    return Money(sum(p.amount.cents for p in purchases))


def purchased_vote_total(purchases: list[Purchase]) -> int:
    return sum(p.total_votes for p in purchases)
