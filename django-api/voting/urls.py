from django.urls import path

from voting.handlers import (
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

urlpatterns = [
    path("hosting-tiers", HostingTierListView.as_view(), name="hosting-tier-list"),
    path("competitions", CompetitionListView.as_view(), name="competition-list"),
    path(
        "competitions/<str:competition_id>",
        CompetitionDetailView.as_view(),
        name="competition-detail",
    ),
    path(
        "competitions/<str:competition_id>/status",
        CompetitionStatusView.as_view(),
        name="competition-status",
    ),
    path(
        "competitions/<str:competition_id>/tier",
        CompetitionTierView.as_view(),
        name="competition-tier",
    ),
    path(
        "competitions/<str:competition_id>/voting-rules",
        VotingRulesView.as_view(),
        name="competition-voting-rules",
    ),
    path(
        "competitions/<str:competition_id>/contestants",
        ContestantListView.as_view(),
        name="contestant-list",
    ),
    path(
        "competitions/<str:competition_id>/votes",
        VoteView.as_view(),
        name="vote-create",
    ),
    path(
        "competitions/<str:competition_id>/qr-votes",
        QrVoteView.as_view(),
        name="qr-vote-create",
    ),
    path(
        "competitions/<str:competition_id>/quota",
        QuotaView.as_view(),
        name="vote-quota",
    ),
    path(
        "competitions/<str:competition_id>/vote-breakdown",
        VoteBreakdownView.as_view(),
        name="vote-breakdown",
    ),
    path(
        "competitions/<str:competition_id>/leaderboard",
        LeaderboardView.as_view(),
        name="leaderboard",
    ),
    path(
        "competitions/<str:competition_id>/revenue-report",
        RevenueReportView.as_view(),
        name="revenue-report",
    ),
    path(
        "contestants/<str:contestant_id>/status",
        ContestantStatusView.as_view(),
        name="contestant-status",
    ),
    path("purchases/checkout", PurchaseCheckoutView.as_view(), name="purchase-checkout"),
    path("purchases/settle", PurchaseSettlementView.as_view(), name="purchase-settle"),
    path("join-submissions", JoinSubmissionView.as_view(), name="join-submission"),
    path("host-submissions", HostSubmissionView.as_view(), name="host-submission"),
    path("nominations", NominationView.as_view(), name="nomination"),
    path("submissions", SubmissionListView.as_view(), name="submission-list"),
    path(
        "submissions/<str:submission_id>/status",
        SubmissionStatusView.as_view(),
        name="submission-status",
    ),
    path(
        "submissions/<str:submission_id>/nomination-status",
        NominationStatusView.as_view(),
        name="nomination-status",
    ),
    path("platform-settings", PlatformSettingsView.as_view(), name="platform-settings"),
]
