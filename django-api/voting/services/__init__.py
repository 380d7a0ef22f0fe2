"""Services - all business logic lives here.

Services:
- Depend only on interfaces (stores, payment gateway)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

from voting.services.checkout_service import VoteCheckout
from voting.services.competition_service import CompetitionService, ContestantService
from voting.services.leaderboard_service import LeaderboardService
from voting.services.payments import ChargeConfirmation, PaymentGateway, PaymentToken
from voting.services.quota_service import QuotaEnforcer
from voting.services.settings_service import SettingsService
from voting.services.settlement_service import SettlementService
from voting.services.submission_service import SubmissionWorkflow
from voting.services.vote_ledger import VoteLedger

__all__ = [
    "ChargeConfirmation",
    "CompetitionService",
    "ContestantService",
    "LeaderboardService",
    "PaymentGateway",
    "PaymentToken",
    "QuotaEnforcer",
    "SettingsService",
    "SettlementService",
    "SubmissionWorkflow",
    "VoteCheckout",
    "VoteLedger",
]
