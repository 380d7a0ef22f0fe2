"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from voting.domain import HostingTier, Money, Percentage, TierId
from voting.domain.errors import PaymentFailedError
from voting.services import (
    CompetitionService,
    ContestantService,
    LeaderboardService,
    SettlementService,
    VoteLedger,
)
from voting.services.payments import ChargeConfirmation, PaymentGateway
from voting.stores.memory_store import InMemoryStore

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class ApprovingGateway(PaymentGateway):
    def __init__(self) -> None:
        self.charges = []

    def charge(self, token, amount, description, email=None, name=None):
        self.charges.append((token, amount, description))
        return ChargeConfirmation(transaction_id=f"txn-{len(self.charges)}", amount=amount)


class DecliningGateway(PaymentGateway):
    def __init__(self, message: str = "Card declined") -> None:
        self.message = message

    def charge(self, token, amount, description, email=None, name=None):
        raise PaymentFailedError(self.message)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tiers() -> list[HostingTier]:
    return [
        HostingTier(TierId(uuid4()), "Starter", Money(4900), 5, Percentage.of(20)),
        HostingTier(TierId(uuid4()), "Pro", Money(14900), 15, Percentage.of(35)),
        HostingTier(TierId(uuid4()), "Premium", Money(39900), 25, Percentage.of(50)),
    ]


@pytest.fixture
def store(tiers) -> InMemoryStore:
    return InMemoryStore(tiers=tiers)


@pytest.fixture
def competitions(store, clock) -> CompetitionService:
    return CompetitionService(store, store, clock=clock)


@pytest.fixture
def contestants(store, clock) -> ContestantService:
    return ContestantService(store, clock=clock)


@pytest.fixture
def ledger(store, clock) -> VoteLedger:
    return VoteLedger(store, store, clock=clock)


@pytest.fixture
def rankings(store) -> LeaderboardService:
    return LeaderboardService(store, store)


@pytest.fixture
def settlement(store) -> SettlementService:
    return SettlementService(store, store)


@pytest.fixture
def make_competition(competitions, tiers):
    """Create an active competition on the Pro tier unless told otherwise."""

    def make(status: str = "active", **kwargs):
        kwargs.setdefault("tier_id", str(tiers[1].id))
        competition = competitions.create_competition(
            title="Spring Talent Show", category="Singing", **kwargs
        )
        if status == "draft":
            return competition
        competition = competitions.update_status(str(competition.id), "active")
        if status == "completed":
            competition = competitions.update_status(str(competition.id), "completed")
        return competition

    return make


@pytest.fixture
def make_contestant(contestants, clock):
    """Enter an approved contestant; each one applies a second after the last."""

    def make(competition, name: str = "Ava", approved: bool = True):
        clock.advance(seconds=1)
        enter = contestants.assign if approved else contestants.apply
        return enter(str(competition.id), f"profile-{name.lower()}", name)

    return make


@pytest.fixture
def pro_tier(db):
    """The Pro package seeded by the default-tiers migration."""
    from voting.models import HostingTier as HostingTierRow

    return HostingTierRow.objects.get(name="Pro")


@pytest.fixture
def competition_id(api_client, pro_tier) -> str:
    """Active competition on the Pro tier, capped at two free votes a day."""
    response = api_client.post(
        "/api/competitions",
        {
            "title": "Spring Talent Show",
            "category": "Singing",
            "tier_id": str(pro_tier.id),
            "max_votes_per_day": 2,
        },
    )
    assert response.status_code == 201
    competition_id = response.json()["id"]
    response = api_client.patch(
        f"/api/competitions/{competition_id}/status", {"status": "active"}
    )
    assert response.status_code == 200
    return competition_id


@pytest.fixture
def contestant_id(api_client, competition_id) -> str:
    response = api_client.post(
        f"/api/competitions/{competition_id}/contestants",
        {"talent_profile_id": "profile-ava", "display_name": "Ava", "approved": True},
    )
    assert response.status_code == 201
    return response.json()["id"]
