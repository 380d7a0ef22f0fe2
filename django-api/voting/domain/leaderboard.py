"""Weighted leaderboard calculation.

Online votes are scaled by the competition's ``online_vote_weight`` and added
to unscaled in-person votes. The weighted figure only affects ranking; the
ledger keeps every raw vote.
"""

from decimal import ROUND_FLOOR, Decimal

from voting.domain.models import (
    Competition,
    Contestant,
    ContestantTally,
    Leaderboard,
    LeaderboardEntry,
)

ZERO = Decimal("0")
TENTHS_IN_WHOLE = 1000  # 100.0% expressed in tenths of a percent


def weighted_votes(tally: ContestantTally, competition: Competition) -> Decimal:
    """Return the ranking weight of a contestant's raw counts."""
    if competition.in_person_only:
        return Decimal(tally.in_person)
    return competition.online_vote_weight.apply(tally.online) + tally.in_person


def apportion_percentages(weights: list[Decimal]) -> list[Decimal]:
    """Split 100% across ``weights`` at 0.1 resolution.

    Uses the largest-remainder method so the shares always add up to exactly
    100.0 when any weight is positive. Leftover tenths go to the largest
    fractional parts; equal remainders favour earlier positions.
    """
    total = sum(weights, ZERO)
    if total <= 0:
        return [ZERO.quantize(Decimal("0.1")) for _ in weights]

    exact = [w * TENTHS_IN_WHOLE / total for w in weights]
    floors = [int(e.to_integral_value(rounding=ROUND_FLOOR)) for e in exact]
    leftover = TENTHS_IN_WHOLE - sum(floors)

    by_remainder = sorted(
        range(len(weights)), key=lambda i: (-(exact[i] - floors[i]), i)
    )
    for i in by_remainder[:leftover]:
        floors[i] += 1

    return [(Decimal(tenths) / 10).quantize(Decimal("0.1")) for tenths in floors]


def build_leaderboard(
    competition: Competition,
    contestants: list[Contestant],
    tallies: dict,
) -> Leaderboard:
    """Rank approved contestants by weighted votes.

    Args:
        competition: Competition whose weighting rules apply.
        contestants: Contestant entries; only approved ones are ranked.
        tallies: Mapping of ContestantId -> ContestantTally from the ledger.

    Ties on weighted votes go to the earlier application, then to the lower
    contestant id, so the order is fully deterministic.
    """
    scored = []
    for contestant in contestants:
        if not contestant.can_receive_votes:
            continue
        tally = tallies.get(contestant.id) or ContestantTally(contestant.id)
        scored.append((contestant, tally, weighted_votes(tally, competition)))

    scored.sort(key=lambda row: (-row[2], row[0].applied_at, str(row[0].id)))
    percentages = apportion_percentages([row[2] for row in scored])

    entries = tuple(
        LeaderboardEntry(
            rank=position,
            contestant_id=contestant.id,
            display_name=contestant.display_name,
            online_votes=0 if competition.in_person_only else tally.online,
            in_person_votes=tally.in_person,
            weighted_votes=weight,
            vote_percentage=percentage,
        )
        for position, ((contestant, tally, weight), percentage) in enumerate(
            zip(scored, percentages), start=1
        )
    )
    return Leaderboard(
        competition_id=competition.id,
        total_weighted_votes=sum((row[2] for row in scored), ZERO),
        entries=entries,
    )
