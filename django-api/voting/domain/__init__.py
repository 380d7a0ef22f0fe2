from voting.domain.models import (
    CheckoutReceipt,
    Competition,
    Contestant,
    ContestantTally,
    HostingTier,
    Leaderboard,
    LeaderboardEntry,
    Person,
    PlatformSettings,
    Purchase,
    QuotaDecision,
    RevenueReport,
    RevenueSplit,
    SettlementReceipt,
    Submission,
    Vote,
    VoteBreakdown,
    VotePackage,
    VoteReceipt,
)
from voting.domain.value_objects import (
    ApplicationStatus,
    CompetitionId,
    CompetitionStatus,
    ContestantId,
    Money,
    NominationStatus,
    Percentage,
    SubmissionId,
    SubmissionKind,
    TierId,
    VoteSource,
    VoteWeight,
)

__all__ = [
    "CheckoutReceipt",
    "Competition",
    "Contestant",
    "ContestantTally",
    "HostingTier",
    "Leaderboard",
    "LeaderboardEntry",
    "Person",
    "PlatformSettings",
    "Purchase",
    "QuotaDecision",
    "RevenueReport",
    "RevenueSplit",
    "SettlementReceipt",
    "Submission",
    "Vote",
    "VoteBreakdown",
    "VotePackage",
    "VoteReceipt",
    "ApplicationStatus",
    "CompetitionId",
    "CompetitionStatus",
    "ContestantId",
    "Money",
    "NominationStatus",
    "Percentage",
    "SubmissionId",
    "SubmissionKind",
    "TierId",
    "VoteSource",
    "VoteWeight",
]
