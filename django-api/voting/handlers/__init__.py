from voting.handlers.views import (
    CompetitionDetailView,
    CompetitionListView,
    CompetitionStatusView,
    CompetitionTierView,
    ContestantListView,
    ContestantStatusView,
    HostingTierListView,
    HostSubmissionView,
    JoinSubmissionView,
    LeaderboardView,
    NominationStatusView,
    NominationView,
    PlatformSettingsView,
    PurchaseCheckoutView,
    PurchaseSettlementView,
    QrVoteView,
    QuotaView,
    RevenueReportView,
    SubmissionListView,
    SubmissionStatusView,
    VoteBreakdownView,
    VoteView,
    VotingRulesView,
)

__all__ = [
    "CompetitionDetailView",
    "CompetitionListView",
    "CompetitionStatusView",
    "CompetitionTierView",
    "ContestantListView",
    "ContestantStatusView",
    "HostingTierListView",
    "HostSubmissionView",
    "JoinSubmissionView",
    "LeaderboardView",
    "NominationStatusView",
    "NominationView",
    "PlatformSettingsView",
    "PurchaseCheckoutView",
    "PurchaseSettlementView",
    "QrVoteView",
    "QuotaView",
    "RevenueReportView",
    "SubmissionListView",
    "SubmissionStatusView",
    "VoteBreakdownView",
    "VoteView",
    "VotingRulesView",
]
