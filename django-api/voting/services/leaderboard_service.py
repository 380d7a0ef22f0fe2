"""Read-side service for vote breakdowns and leaderboards.

Everything is recomputed from ledger state; nothing here writes.
"""

from voting.domain import Leaderboard, VoteBreakdown
from voting.domain.leaderboard import build_leaderboard
from voting.services.lookups import require_competition
from voting.stores.interfaces import CompetitionStore, VoteLedgerStore


class LeaderboardService:
    """Service for weighted rankings."""

    def __init__(self, competitions: CompetitionStore, ledger: VoteLedgerStore) -> None:
        self._competitions = competitions
        self._ledger = ledger

    def vote_breakdown(self, competition_id: str) -> VoteBreakdown:
        """Return raw online and in-person counts for a competition.

        Raises:
            InvalidIdError: If the competition_id is not a valid UUID.
            CompetitionNotFoundError: If the competition does not exist.
        """
        competition = require_competition(self._competitions, competition_id)
        tallies = self._ledger.tallies(competition.id).values()
        online = sum(t.online for t in tallies)
        in_person = sum(t.in_person for t in tallies)
        return VoteBreakdown(
            online=online,
            in_person=in_person,
            total=online + in_person,
            online_vote_weight=competition.online_vote_weight.value,
            in_person_only=competition.in_person_only,
        )

    def leaderboard(self, competition_id: str) -> Leaderboard:
        """Return approved contestants ranked by weighted votes.

        Raises:
            InvalidIdError: If the competition_id is not a valid UUID.
            CompetitionNotFoundError: If the competition does not exist.
        """
        competition = require_competition(self._competitions, competition_id)
        return build_leaderboard(
            competition,
            self._competitions.list_contestants(competition.id),
            self._ledger.tallies(competition.id),
        )
