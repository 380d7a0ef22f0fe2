"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to the exception handler in handlers/errors.py
- Cache read-heavy GETs
- Never contain business logic
"""

from django.conf import settings
from django.utils.module_loading import import_string
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from voting.domain import PlatformSettings
from voting.handlers.cache import breakdown_key, cached, leaderboard_key, revenue_key
from voting.handlers.serializers import (
    ApplicationStatusSerializer,
    CheckoutReceiptSerializer,
    CheckoutRequestSerializer,
    CompetitionCreateSerializer,
    CompetitionSerializer,
    CompetitionStatusSerializer,
    ContestantEntrySerializer,
    ContestantSerializer,
    HostingTierSerializer,
    HostSubmissionSerializer,
    JoinSubmissionSerializer,
    LeaderboardSerializer,
    NominationRequestSerializer,
    NominationStatusSerializer,
    PlatformSettingsSerializer,
    PlatformSettingsUpdateSerializer,
    PurchaseSettlementSerializer,
    QrVoteRequestSerializer,
    QuotaStatusSerializer,
    RevenueReportSerializer,
    SettlementReceiptSerializer,
    SubmissionSerializer,
    TierChangeSerializer,
    VoteBreakdownSerializer,
    VoteReceiptSerializer,
    VoteRequestSerializer,
    VotingRulesSerializer,
    payment_token_from,
    person_from,
)
from voting.services import (
    CompetitionService,
    ContestantService,
    LeaderboardService,
    PaymentGateway,
    SettingsService,
    SettlementService,
    SubmissionWorkflow,
    VoteCheckout,
    VoteLedger,
)
from voting.stores.django_store import (
    DjangoCompetitionStore,
    DjangoSettingsStore,
    DjangoSubmissionStore,
    DjangoVoteLedgerStore,
)


def get_payment_gateway() -> PaymentGateway:
    return import_string(settings.VOTING_PAYMENT_GATEWAY)()


def load_platform_settings() -> PlatformSettings:
    """One settings snapshot per request."""
    return SettingsService(DjangoSettingsStore()).get_settings()


def vote_ledger() -> VoteLedger:
    return VoteLedger(
        DjangoCompetitionStore(),
        DjangoVoteLedgerStore(),
        replay_window_seconds=settings.VOTING["FREE_VOTE_REPLAY_WINDOW_SECONDS"],
    )


def competition_service() -> CompetitionService:
    return CompetitionService(DjangoCompetitionStore(), DjangoVoteLedgerStore())


def submission_workflow() -> SubmissionWorkflow:
    return SubmissionWorkflow(
        DjangoSubmissionStore(), DjangoCompetitionStore(), get_payment_gateway()
    )


def validated(serializer_class, request: Request) -> dict:
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# Competitions


class HostingTierListView(APIView):
    """Handler for GET /api/hosting-tiers"""

    def get(self, request: Request) -> Response:
        tiers = competition_service().list_tiers()
        return Response(HostingTierSerializer(tiers, many=True).data)


class CompetitionListView(APIView):
    """Handler for POST /api/competitions"""

    def post(self, request: Request) -> Response:
        data = validated(CompetitionCreateSerializer, request)
        competition = competition_service().create_competition(**data)
        return Response(
            CompetitionSerializer(competition).data, status=status.HTTP_201_CREATED
        )


class CompetitionDetailView(APIView):
    """Handler for GET|DELETE /api/competitions/{competition_id}"""

    def get(self, request: Request, competition_id: str) -> Response:
        competition = competition_service().get_competition(competition_id)
        return Response(CompetitionSerializer(competition).data)

    def delete(self, request: Request, competition_id: str) -> Response:
        competition_service().delete_competition(competition_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CompetitionStatusView(APIView):
    """Handler for PATCH /api/competitions/{competition_id}/status"""

    def patch(self, request: Request, competition_id: str) -> Response:
        data = validated(CompetitionStatusSerializer, request)
        competition = competition_service().update_status(competition_id, data["status"])
        return Response(CompetitionSerializer(competition).data)


class CompetitionTierView(APIView):
    """Handler for PUT /api/competitions/{competition_id}/tier"""

    def put(self, request: Request, competition_id: str) -> Response:
        data = validated(TierChangeSerializer, request)
        competition = competition_service().change_tier(competition_id, data["tier_id"])
        return Response(CompetitionSerializer(competition).data)


class VotingRulesView(APIView):
    """Handler for PATCH /api/competitions/{competition_id}/voting-rules

    Sending ``max_votes_per_day: null`` falls back to the platform default.
    """

    def patch(self, request: Request, competition_id: str) -> Response:
        data = validated(VotingRulesSerializer, request)
        competition = competition_service().update_voting_rules(
            competition_id,
            max_votes_per_day=data.get("max_votes_per_day"),
            online_vote_weight=data.get("online_vote_weight"),
            in_person_only=data.get("in_person_only"),
            clear_daily_cap=(
                "max_votes_per_day" in data and data["max_votes_per_day"] is None
            ),
        )
        return Response(CompetitionSerializer(competition).data)


class ContestantListView(APIView):
    """Handler for GET|POST /api/competitions/{competition_id}/contestants"""

    def get(self, request: Request, competition_id: str) -> Response:
        contestants = ContestantService(DjangoCompetitionStore()).list_contestants(
            competition_id
        )
        return Response(ContestantSerializer(contestants, many=True).data)

    def post(self, request: Request, competition_id: str) -> Response:
        data = validated(ContestantEntrySerializer, request)
        service = ContestantService(DjangoCompetitionStore())
        enter = service.assign if data["approved"] else service.apply
        contestant = enter(competition_id, data["talent_profile_id"], data["display_name"])
        return Response(
            ContestantSerializer(contestant).data, status=status.HTTP_201_CREATED
        )


class ContestantStatusView(APIView):
    """Handler for PATCH /api/contestants/{contestant_id}/status"""

    def patch(self, request: Request, contestant_id: str) -> Response:
        data = validated(ApplicationStatusSerializer, request)
        contestant = ContestantService(DjangoCompetitionStore()).set_application_status(
            contestant_id, data["status"]
        )
        return Response(ContestantSerializer(contestant).data)


# Votes


class VoteView(APIView):
    """Handler for POST /api/competitions/{competition_id}/votes"""

    def post(self, request: Request, competition_id: str) -> Response:
        data = validated(VoteRequestSerializer, request)
        receipt = vote_ledger().record_vote(
            competition_id,
            data["contestant_id"],
            data["source"],
            data["voter_identity"],
            load_platform_settings(),
            request_id=data.get("request_id") or None,
        )
        code = (
            status.HTTP_201_CREATED
            if receipt.accepted
            else status.HTTP_429_TOO_MANY_REQUESTS
        )
        return Response(VoteReceiptSerializer(receipt).data, status=code)


class QrVoteView(APIView):
    """Handler for POST /api/competitions/{competition_id}/qr-votes"""

    def post(self, request: Request, competition_id: str) -> Response:
        data = validated(QrVoteRequestSerializer, request)
        receipt = vote_ledger().record_vote(
            competition_id,
            data["contestant_id"],
            "in_person_qr",
            f"station:{data['station_id']}",
            load_platform_settings(),
        )
        return Response(VoteReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)


class QuotaView(APIView):
    """Handler for GET /api/competitions/{competition_id}/quota?voter_identity="""

    def get(self, request: Request, competition_id: str) -> Response:
        decision = vote_ledger().free_vote_status(
            competition_id,
            request.query_params.get("voter_identity", ""),
            load_platform_settings(),
        )
        return Response(QuotaStatusSerializer(decision).data)


class PurchaseSettlementView(APIView):
    """Handler for POST /api/purchases/settle

    Called once the gateway confirms a vote purchase. Redelivery of the same
    transaction is acknowledged with 200 and credits nothing.
    """

    def post(self, request: Request) -> Response:
        data = validated(PurchaseSettlementSerializer, request)
        receipt = vote_ledger().credit_purchase(**data)
        code = status.HTTP_200_OK if receipt.duplicate else status.HTTP_201_CREATED
        return Response(SettlementReceiptSerializer(receipt).data, status=code)


class PurchaseCheckoutView(APIView):
    """Handler for POST /api/purchases/checkout"""

    def post(self, request: Request) -> Response:
        data = validated(CheckoutRequestSerializer, request)
        receipt = VoteCheckout(vote_ledger(), get_payment_gateway()).checkout(
            data["competition_id"],
            data["contestant_id"],
            person_from(data["buyer"]),
            payment_token_from(data["payment_token"]),
            load_platform_settings(),
            package_index=data.get("package_index"),
            vote_count=data.get("vote_count"),
        )
        return Response(
            CheckoutReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED
        )


# Reads


class VoteBreakdownView(APIView):
    """Handler for GET /api/competitions/{competition_id}/vote-breakdown"""

    def get(self, request: Request, competition_id: str) -> Response:
        def compute():
            service = LeaderboardService(DjangoCompetitionStore(), DjangoVoteLedgerStore())
            return dict(VoteBreakdownSerializer(service.vote_breakdown(competition_id)).data)

        return Response(cached(breakdown_key(competition_id), compute))


class LeaderboardView(APIView):
    """Handler for GET /api/competitions/{competition_id}/leaderboard"""

    def get(self, request: Request, competition_id: str) -> Response:
        def compute():
            service = LeaderboardService(DjangoCompetitionStore(), DjangoVoteLedgerStore())
            return dict(LeaderboardSerializer(service.leaderboard(competition_id)).data)

        return Response(cached(leaderboard_key(competition_id), compute))


class RevenueReportView(APIView):
    """Handler for GET /api/competitions/{competition_id}/revenue-report"""

    def get(self, request: Request, competition_id: str) -> Response:
        def compute():
            service = SettlementService(DjangoCompetitionStore(), DjangoVoteLedgerStore())
            report = service.revenue_report(competition_id, load_platform_settings())
            return dict(RevenueReportSerializer(report).data)

        return Response(cached(revenue_key(competition_id), compute))


# Intake


class JoinSubmissionView(APIView):
    """Handler for POST /api/join-submissions"""

    def post(self, request: Request) -> Response:
        data = validated(JoinSubmissionSerializer, request)
        submission = submission_workflow().submit_application(
            person_from(data["applicant"]),
            data["competition_id"],
            load_platform_settings(),
            payment_token=payment_token_from(data.get("payment_token")),
            details=data.get("details"),
        )
        return Response(
            SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED
        )


class HostSubmissionView(APIView):
    """Handler for POST /api/host-submissions"""

    def post(self, request: Request) -> Response:
        data = validated(HostSubmissionSerializer, request)
        submission = submission_workflow().submit_host_request(
            person_from(data["applicant"]),
            load_platform_settings(),
            payment_token=payment_token_from(data.get("payment_token")),
            details={**data.get("details", {}), "event_name": data["event_name"]},
        )
        return Response(
            SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED
        )


class NominationView(APIView):
    """Handler for POST /api/nominations"""

    def post(self, request: Request) -> Response:
        data = validated(NominationRequestSerializer, request)
        submission = submission_workflow().nominate(
            person_from(data["nominee"]),
            person_from(data["nominator"]),
            data["competition_id"],
            load_platform_settings(),
            payment_token=payment_token_from(data.get("payment_token")),
            chosen_nonprofit=data.get("chosen_nonprofit"),
            details=data.get("details"),
        )
        return Response(
            SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED
        )


class SubmissionListView(APIView):
    """Handler for GET /api/submissions?kind="""

    def get(self, request: Request) -> Response:
        submissions = submission_workflow().list_submissions(
            request.query_params.get("kind") or None
        )
        return Response(SubmissionSerializer(submissions, many=True).data)


class SubmissionStatusView(APIView):
    """Handler for PATCH /api/submissions/{submission_id}/status"""

    def patch(self, request: Request, submission_id: str) -> Response:
        data = validated(ApplicationStatusSerializer, request)
        submission = submission_workflow().set_status(submission_id, data["status"])
        return Response(SubmissionSerializer(submission).data)


class NominationStatusView(APIView):
    """Handler for PATCH /api/submissions/{submission_id}/nomination-status"""

    def patch(self, request: Request, submission_id: str) -> Response:
        data = validated(NominationStatusSerializer, request)
        submission = submission_workflow().set_nomination_status(
            submission_id, data["status"]
        )
        return Response(SubmissionSerializer(submission).data)


# Settings


class PlatformSettingsView(APIView):
    """Handler for GET|PUT /api/platform-settings

    PUT accepts any subset of fields; omitted fields keep their value.
    """

    def get(self, request: Request) -> Response:
        return Response(PlatformSettingsSerializer(load_platform_settings()).data)

    def put(self, request: Request) -> Response:
        serializer = PlatformSettingsUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        updated = SettingsService(DjangoSettingsStore()).update_settings(
            **serializer.validated_data
        )
        return Response(PlatformSettingsSerializer(updated).data)
