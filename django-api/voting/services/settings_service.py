"""Platform settings service."""

from dataclasses import replace
from decimal import Decimal, InvalidOperation

from voting.domain import Money, Percentage, PlatformSettings, VotePackage
from voting.domain.errors import ValidationError
from voting.stores.interfaces import SettingsStore

PERCENT_FIELDS = {"sales_tax_percent": "sales_tax", "platform_fee_percent": "platform_fee"}
MONEY_FIELDS = {
    "vote_price_cents": "vote_price",
    "join_fee_cents": "join_fee",
    "host_fee_cents": "host_fee",
    "nomination_fee_cents": "nomination_fee",
}
FLAG_FIELDS = {"join_open", "host_open", "nominations_enabled", "nonprofit_required"}


class SettingsService:
    """Service for reading and editing the platform settings snapshot."""

    def __init__(self, store: SettingsStore) -> None:
        self._store = store

    def get_settings(self) -> PlatformSettings:
        return self._store.load_settings()

    def update_settings(self, **changes) -> PlatformSettings:
        """Apply partial changes given in wire units (percent, cents).

        Raises:
            ValidationError: If a value is out of range or a field is unknown.
        """
        updates = {}
        try:
            for name, value in changes.items():
                if name in PERCENT_FIELDS:
                    updates[PERCENT_FIELDS[name]] = Percentage(Decimal(str(value)))
                elif name in MONEY_FIELDS:
                    updates[MONEY_FIELDS[name]] = Money(int(value))
                elif name in FLAG_FIELDS:
                    updates[name] = bool(value)
                elif name == "free_votes_per_day":
                    if int(value) < 0:
                        raise ValueError("free_votes_per_day cannot be negative")
                    updates[name] = int(value)
                elif name == "vote_packages":
                    updates[name] = tuple(
                        VotePackage(
                            name=p["name"],
                            vote_count=int(p["vote_count"]),
                            bonus_votes=int(p.get("bonus_votes", 0)),
                            price=Money(int(p["price_cents"])),
                        )
                        for p in value
                    )
                else:
                    raise ValidationError(f"Unknown setting: {name}")
        except (ValueError, InvalidOperation, KeyError, TypeError) as exc:
            raise ValidationError(f"Invalid settings: {exc}") from None

        settings = replace(self._store.load_settings(), **updates)
        self._store.save_settings(settings)
        return settings
