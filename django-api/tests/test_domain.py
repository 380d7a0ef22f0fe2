"""Unit tests for domain value objects, leaderboard ranking and revenue split.

Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from voting.domain import (
    ApplicationStatus,
    Competition,
    CompetitionId,
    CompetitionStatus,
    Contestant,
    ContestantId,
    ContestantTally,
    HostingTier,
    Money,
    Percentage,
    PlatformSettings,
    TierId,
    VoteWeight,
)
from voting.domain.leaderboard import apportion_percentages, build_leaderboard
from voting.domain.settlement import split_revenue

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_competition(**overrides) -> Competition:
    fields = dict(
        id=CompetitionId(uuid4()),
        title="Spring Talent Show",
        category="Singing",
        status=CompetitionStatus.ACTIVE,
        online_vote_weight=VoteWeight(100),
        in_person_only=False,
        max_votes_per_day=None,
        timezone="UTC",
        created_at=NOW,
    )
    fields.update(overrides)
    return Competition(**fields)


def make_entry(competition, name, minutes=0, status=ApplicationStatus.APPROVED):
    return Contestant(
        id=ContestantId(uuid4()),
        competition_id=competition.id,
        talent_profile_id=f"profile-{name}",
        display_name=name,
        application_status=status,
        applied_at=NOW + timedelta(minutes=minutes),
    )


class TestMoney:
    """Tests for the Money value object."""

    def test_percent_rounds_half_up(self):
        """Half a cent rounds up."""
        assert Money(1425).percent(Percentage.of(35)) == Money(499)
        assert Money(10).percent(Percentage.of(5)) == Money(1)

    def test_negative_amount_rejected(self):
        """Money cannot be negative."""
        with pytest.raises(ValueError):
            Money(-1)

    def test_str_shows_dollars(self):
        assert str(Money(1500)) == "15.00"


class TestPercentageAndWeight:
    """Tests for Percentage and VoteWeight."""

    @pytest.mark.parametrize("value", ["-0.01", "100.01"])
    def test_percentage_out_of_range(self, value):
        with pytest.raises(ValueError):
            Percentage.of(value)

    @pytest.mark.parametrize("value", [0, 101])
    def test_weight_out_of_range(self, value):
        with pytest.raises(ValueError):
            VoteWeight(value)

    def test_weight_scales_online_votes(self):
        """A 50% weight halves the online count."""
        assert VoteWeight(50).apply(10) == Decimal("5")

    def test_id_from_string_rejects_garbage(self):
        with pytest.raises(ValueError):
            CompetitionId.from_string("not-a-uuid")


class TestDailyCap:
    """Tests for Competition.daily_cap."""

    def test_competition_cap_overrides_platform_default(self):
        competition = make_competition(max_votes_per_day=3)
        assert competition.daily_cap(PlatformSettings(free_votes_per_day=5)) == 3

    def test_platform_default_when_unset(self):
        competition = make_competition()
        assert competition.daily_cap(PlatformSettings(free_votes_per_day=7)) == 7


class TestApportionPercentages:
    """Tests for largest-remainder percentage apportionment."""

    def test_thirds_sum_to_exactly_one_hundred(self):
        shares = apportion_percentages([Decimal(1), Decimal(1), Decimal(1)])
        assert shares == [Decimal("33.4"), Decimal("33.3"), Decimal("33.3")]
        assert sum(shares) == Decimal("100.0")

    def test_uneven_weights_sum_to_one_hundred(self):
        shares = apportion_percentages([Decimal(7), Decimal("2.5"), Decimal(3)])
        assert sum(shares) == Decimal("100.0")

    def test_zero_total_gives_zero_shares(self):
        """No division by zero when nobody has votes."""
        assert apportion_percentages([Decimal(0), Decimal(0)]) == [
            Decimal("0.0"),
            Decimal("0.0"),
        ]

    def test_single_contestant_gets_everything(self):
        assert apportion_percentages([Decimal(4)]) == [Decimal("100.0")]


class TestBuildLeaderboard:
    """Tests for weighted leaderboard ranking."""

    def test_half_weight_tie_goes_to_earlier_application(self):
        """10 online at 50% ties 5 in-person; the earlier applicant ranks first."""
        competition = make_competition(online_vote_weight=VoteWeight(50))
        online_star = make_entry(competition, "Ava", minutes=0)
        stage_star = make_entry(competition, "Ben", minutes=5)
        tallies = {
            online_star.id: ContestantTally(online_star.id, free=10),
            stage_star.id: ContestantTally(stage_star.id, in_person=5),
        }

        board = build_leaderboard(competition, [stage_star, online_star], tallies)

        assert [e.display_name for e in board.entries] == ["Ava", "Ben"]
        assert [e.rank for e in board.entries] == [1, 2]
        assert board.entries[0].weighted_votes == Decimal("5")
        assert board.entries[1].weighted_votes == Decimal("5")
        assert [e.vote_percentage for e in board.entries] == [
            Decimal("50.0"),
            Decimal("50.0"),
        ]
        assert board.total_weighted_votes == Decimal("10")

    def test_weight_changes_ranking_without_touching_raw_counts(self):
        competition = make_competition(online_vote_weight=VoteWeight(30))
        online_star = make_entry(competition, "Ava", minutes=0)
        stage_star = make_entry(competition, "Ben", minutes=5)
        tallies = {
            online_star.id: ContestantTally(online_star.id, free=6, purchased=4),
            stage_star.id: ContestantTally(stage_star.id, in_person=4),
        }

        board = build_leaderboard(competition, [online_star, stage_star], tallies)

        assert [e.display_name for e in board.entries] == ["Ben", "Ava"]
        assert board.entries[1].online_votes == 10
        assert board.entries[1].weighted_votes == Decimal("3")

    def test_only_approved_contestants_are_ranked(self):
        competition = make_competition()
        approved = make_entry(competition, "Ava")
        pending = make_entry(competition, "Ben", status=ApplicationStatus.PENDING)
        rejected = make_entry(competition, "Cy", status=ApplicationStatus.REJECTED)

        board = build_leaderboard(competition, [approved, pending, rejected], {})

        assert [e.display_name for e in board.entries] == ["Ava"]
        assert board.entries[0].vote_percentage == Decimal("0.0")

    def test_in_person_only_ignores_online_votes(self):
        competition = make_competition(in_person_only=True)
        ava = make_entry(competition, "Ava")
        tallies = {ava.id: ContestantTally(ava.id, free=50, in_person=3)}

        entry = build_leaderboard(competition, [ava], tallies).entries[0]

        assert entry.online_votes == 0
        assert entry.in_person_votes == 3
        assert entry.weighted_votes == Decimal("3")


class TestSplitRevenue:
    """Tests for tax, host and platform revenue split."""

    @pytest.fixture
    def pro_tier(self):
        return HostingTier(TierId(uuid4()), "Pro", Money(14900), 15, Percentage.of(35))

    def test_tax_then_tier_share(self, pro_tier):
        """$15.00 at 5% tax on a 35% tier pays the host $4.99."""
        settings = PlatformSettings(sales_tax=Percentage.of(5))

        split = split_revenue(Money(1500), settings, pro_tier)

        assert split.tax == Money(75)
        assert split.net == Money(1425)
        assert split.host_share == Money(499)
        assert split.platform_share == Money(926)

    def test_parts_always_add_up(self, pro_tier):
        settings = PlatformSettings(sales_tax=Percentage.of("7.25"))

        split = split_revenue(Money(9999), settings, pro_tier)

        assert split.tax + split.host_share + split.platform_share == split.gross

    def test_platform_fee_setting_is_not_applied(self, pro_tier):
        with_fee = PlatformSettings(platform_fee=Percentage.of(90))

        split = split_revenue(Money(1000), with_fee, pro_tier)

        assert split.host_share == Money(350)
        assert split.platform_share == Money(650)

    def test_no_tier_pays_no_host_share(self):
        split = split_revenue(Money(1000), PlatformSettings(), None)

        assert split.host_share == Money(0)
        assert split.platform_share == Money(1000)
