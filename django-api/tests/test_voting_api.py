"""Integration tests for the voting API endpoints.

Run with: pytest tests/test_voting_api.py -v
"""

import pytest

from conftest import ApprovingGateway, DecliningGateway
from voting.models import Purchase, Submission, Vote

UNKNOWN_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


def cast(api_client, competition_id, contestant_id, **extra):
    return api_client.post(
        f"/api/competitions/{competition_id}/votes",
        {
            "contestant_id": contestant_id,
            "source": "online_free",
            "voter_identity": "fan@example.com",
            **extra,
        },
    )


def settle(api_client, competition_id, contestant_id, transaction_id="txn-1", **extra):
    return api_client.post(
        "/api/purchases/settle",
        {
            "transaction_id": transaction_id,
            "competition_id": competition_id,
            "contestant_id": contestant_id,
            "vote_count": 10,
            "bonus_votes": 5,
            "amount_cents": 1500,
            **extra,
        },
    )


@pytest.mark.django_db
class TestCompetitionEndpoints:
    """Tests for competition administration endpoints."""

    def test_default_tiers_are_listed(self, api_client):
        response = api_client.get("/api/hosting-tiers")

        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["Starter", "Pro", "Premium"]
        assert response.json()[1]["revenue_share_percent"] == 35.0

    def test_create_returns_draft(self, api_client, pro_tier):
        response = api_client.post(
            "/api/competitions",
            {"title": "Dance Off", "category": "Dance", "tier_id": str(pro_tier.id)},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["tier"]["name"] == "Pro"
        assert data["online_vote_weight"] == 100

    def test_create_rejects_out_of_range_weight(self, api_client):
        response = api_client.post(
            "/api/competitions",
            {"title": "Dance Off", "category": "Dance", "online_vote_weight": 150},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_get_invalid_id(self, api_client):
        response = api_client.get("/api/competitions/not-a-uuid")

        assert response.status_code == 400
        assert response.json() == {
            "code": "INVALID_ID",
            "message": "Invalid competition ID format",
        }

    def test_get_unknown(self, api_client):
        response = api_client.get(f"/api/competitions/{UNKNOWN_ID}")

        assert response.status_code == 404
        assert response.json()["code"] == "COMPETITION_NOT_FOUND"

    def test_invalid_transition_conflicts(self, api_client, competition_id):
        api_client.patch(f"/api/competitions/{competition_id}/status", {"status": "completed"})

        response = api_client.patch(
            f"/api/competitions/{competition_id}/status", {"status": "active"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

    def test_unknown_status_rejected_at_boundary(self, api_client, competition_id):
        response = api_client.patch(
            f"/api/competitions/{competition_id}/status", {"status": "paused"}
        )

        assert response.status_code == 400

    def test_tier_locked_after_sale(self, api_client, competition_id, contestant_id):
        settle(api_client, competition_id, contestant_id)
        starter = api_client.get("/api/hosting-tiers").json()[0]["id"]

        response = api_client.put(
            f"/api/competitions/{competition_id}/tier", {"tier_id": starter}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "TIER_LOCKED"

    def test_voting_rules_null_cap_falls_back(self, api_client, competition_id):
        response = api_client.patch(
            f"/api/competitions/{competition_id}/voting-rules",
            {"max_votes_per_day": None, "online_vote_weight": 50},
        )

        assert response.status_code == 200
        assert response.json()["max_votes_per_day"] is None
        assert response.json()["online_vote_weight"] == 50

    def test_delete_cascades(self, api_client, competition_id, contestant_id):
        cast(api_client, competition_id, contestant_id)
        settle(api_client, competition_id, contestant_id)

        response = api_client.delete(f"/api/competitions/{competition_id}")

        assert response.status_code == 204
        assert api_client.get(f"/api/competitions/{competition_id}").status_code == 404
        assert Vote.objects.count() == 0
        assert Purchase.objects.count() == 0

    def test_duplicate_contestant_entry(self, api_client, competition_id, contestant_id):
        response = api_client.post(
            f"/api/competitions/{competition_id}/contestants",
            {"talent_profile_id": "profile-ava", "display_name": "Ava"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_APPLIED"

    def test_contestant_approval(self, api_client, competition_id):
        entry = api_client.post(
            f"/api/competitions/{competition_id}/contestants",
            {"talent_profile_id": "profile-ben", "display_name": "Ben"},
        ).json()
        assert entry["application_status"] == "pending"

        response = api_client.patch(
            f"/api/contestants/{entry['id']}/status", {"status": "approved"}
        )

        assert response.status_code == 200
        assert response.json()["application_status"] == "approved"


@pytest.mark.django_db
class TestVoteEndpoints:
    """Tests for casting votes."""

    def test_free_vote_created(self, api_client, competition_id, contestant_id):
        response = cast(api_client, competition_id, contestant_id)

        assert response.status_code == 201
        assert response.json()["accepted"] is True
        assert response.json()["duplicate"] is False
        assert Vote.objects.filter(source="online_free").count() == 1

    def test_quota_exceeded_is_429(self, api_client, competition_id, contestant_id):
        cast(api_client, competition_id, contestant_id, request_id="a")
        cast(api_client, competition_id, contestant_id, request_id="b")

        response = cast(api_client, competition_id, contestant_id, request_id="c")

        assert response.status_code == 429
        assert response.json()["accepted"] is False
        assert response.json()["reason"] == "QUOTA_EXCEEDED"
        assert Vote.objects.count() == 2

    def test_replayed_request_is_acknowledged(
        self, api_client, competition_id, contestant_id
    ):
        first = cast(api_client, competition_id, contestant_id, request_id="tap-1")
        second = cast(api_client, competition_id, contestant_id, request_id="tap-1")

        assert second.status_code == 201
        assert second.json()["duplicate"] is True
        assert second.json()["vote_id"] == first.json()["vote_id"]
        assert Vote.objects.count() == 1

    def test_qr_votes_skip_quota(self, api_client, competition_id, contestant_id):
        for _ in range(4):
            response = api_client.post(
                f"/api/competitions/{competition_id}/qr-votes",
                {"contestant_id": contestant_id, "station_id": "door-1"},
            )
            assert response.status_code == 201

        assert Vote.objects.filter(source="in_person_qr").count() == 4

    def test_closed_competition_conflicts(self, api_client, competition_id, contestant_id):
        api_client.patch(f"/api/competitions/{competition_id}/status", {"status": "completed"})

        response = cast(api_client, competition_id, contestant_id)

        assert response.status_code == 409
        assert response.json()["code"] == "COMPETITION_CLOSED"

    def test_unknown_contestant(self, api_client, competition_id):
        response = cast(api_client, competition_id, UNKNOWN_ID)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CONTESTANT"

    def test_unknown_source_rejected(self, api_client, competition_id, contestant_id):
        response = cast(api_client, competition_id, contestant_id, source="telepathy")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_quota_status(self, api_client, competition_id, contestant_id):
        cast(api_client, competition_id, contestant_id)

        response = api_client.get(
            f"/api/competitions/{competition_id}/quota",
            {"voter_identity": "fan@example.com"},
        )

        assert response.status_code == 200
        assert response.json() == {"used": 1, "cap": 2, "remaining": 1}


@pytest.mark.django_db
class TestPurchaseSettlementEndpoint:
    """Tests for POST /api/purchases/settle."""

    def test_settlement_credits_votes(self, api_client, competition_id, contestant_id):
        response = settle(api_client, competition_id, contestant_id)

        assert response.status_code == 201
        assert response.json() == {"accepted": True, "duplicate": False, "votes_credited": 15}
        assert Vote.objects.filter(source="online_purchased").count() == 15

    def test_redelivery_returns_200(self, api_client, competition_id, contestant_id):
        settle(api_client, competition_id, contestant_id)

        response = settle(api_client, competition_id, contestant_id)

        assert response.status_code == 200
        assert response.json()["duplicate"] is True
        assert Purchase.objects.count() == 1
        assert Vote.objects.count() == 15

    def test_negative_amount_rejected(self, api_client, competition_id, contestant_id):
        response = settle(api_client, competition_id, contestant_id, amount_cents=-5)

        assert response.status_code == 400


@pytest.mark.django_db
class TestPurchaseCheckoutEndpoint:
    """Tests for POST /api/purchases/checkout."""

    BUYER = {"full_name": "Riley Fan", "email": "riley@example.com"}
    TOKEN = {"descriptor": "COMMON.ACCEPT.INAPP.PAYMENT", "value": "opaque"}

    def checkout(self, api_client, competition_id, contestant_id, **choice):
        return api_client.post(
            "/api/purchases/checkout",
            {
                "competition_id": competition_id,
                "contestant_id": contestant_id,
                "buyer": self.BUYER,
                "payment_token": self.TOKEN,
                **choice,
            },
        )

    def test_package_checkout_credits_votes(
        self, api_client, competition_id, contestant_id, monkeypatch
    ):
        monkeypatch.setattr(
            "voting.handlers.views.get_payment_gateway", lambda: ApprovingGateway()
        )

        response = self.checkout(api_client, competition_id, contestant_id, package_index=1)

        assert response.status_code == 201
        assert response.json() == {
            "transaction_id": "txn-1",
            "package_name": "Fan Pack",
            "amount_cents": 1500,
            "votes_credited": 1300,
        }
        assert Purchase.objects.get().transaction_id == "txn-1"
        assert Vote.objects.filter(source="online_purchased").count() == 1300

    def test_declined_charge_credits_nothing(
        self, api_client, competition_id, contestant_id, monkeypatch
    ):
        monkeypatch.setattr(
            "voting.handlers.views.get_payment_gateway", lambda: DecliningGateway()
        )

        response = self.checkout(api_client, competition_id, contestant_id, vote_count=3)

        assert response.status_code == 402
        assert response.json()["code"] == "PAYMENT_FAILED"
        assert Purchase.objects.count() == 0
        assert Vote.objects.count() == 0

    def test_package_choice_required(self, api_client, competition_id, contestant_id):
        response = self.checkout(api_client, competition_id, contestant_id)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
class TestReadEndpoints:
    """Tests for breakdown, leaderboard and revenue report."""

    def test_vote_breakdown(self, api_client, competition_id, contestant_id):
        cast(api_client, competition_id, contestant_id)
        api_client.post(
            f"/api/competitions/{competition_id}/qr-votes",
            {"contestant_id": contestant_id, "station_id": "door-1"},
        )

        response = api_client.get(f"/api/competitions/{competition_id}/vote-breakdown")

        assert response.status_code == 200
        assert response.json() == {
            "online": 1,
            "in_person": 1,
            "total": 2,
            "online_vote_weight": 100,
            "in_person_only": False,
        }

    def test_leaderboard(self, api_client, competition_id, contestant_id):
        settle(api_client, competition_id, contestant_id)

        response = api_client.get(f"/api/competitions/{competition_id}/leaderboard")

        assert response.status_code == 200
        entry = response.json()["entries"][0]
        assert entry["rank"] == 1
        assert entry["contestant_id"] == contestant_id
        assert entry["online_votes"] == 15
        assert entry["weighted_votes"] == 15.0
        assert entry["vote_percentage"] == 100.0

    def test_revenue_report(self, api_client, competition_id, contestant_id):
        api_client.put("/api/platform-settings", {"sales_tax_percent": "5"})
        settle(api_client, competition_id, contestant_id)

        response = api_client.get(f"/api/competitions/{competition_id}/revenue-report")

        assert response.status_code == 200
        data = response.json()
        assert data["total_revenue_cents"] == 1500
        assert data["tax_cents"] == 75
        assert data["net_revenue_cents"] == 1425
        assert data["host_share_cents"] == 499
        assert data["platform_share_cents"] == 926
        assert data["total_purchased_votes"] == 15
        assert data["revenue_share_percent"] == 35.0

    def test_revenue_mismatch_is_500(self, api_client, competition_id, contestant_id):
        settle(api_client, competition_id, contestant_id)
        Purchase.objects.update(bonus_votes=0)

        response = api_client.get(f"/api/competitions/{competition_id}/revenue-report")

        assert response.status_code == 500
        assert response.json()["code"] == "SETTLEMENT_MISMATCH"


@pytest.mark.django_db
class TestIntakeEndpoints:
    """Tests for join, host and nomination submissions."""

    APPLICANT = {"full_name": "Dana Singer", "email": "dana@example.com"}
    TOKEN = {"descriptor": "COMMON.ACCEPT.INAPP.PAYMENT", "value": "opaque"}

    def test_free_join_submission(self, api_client, competition_id):
        response = api_client.post(
            "/api/join-submissions",
            {"competition_id": competition_id, "applicant": self.APPLICANT},
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert response.json()["kind"] == "application"

    def test_fee_without_token_is_402(self, api_client, competition_id):
        api_client.put("/api/platform-settings", {"join_fee_cents": 2500})

        response = api_client.post(
            "/api/join-submissions",
            {"competition_id": competition_id, "applicant": self.APPLICANT},
        )

        assert response.status_code == 402
        assert response.json()["code"] == "PAYMENT_REQUIRED"

    def test_paid_join_submission(self, api_client, competition_id, monkeypatch):
        api_client.put("/api/platform-settings", {"join_fee_cents": 2500})
        monkeypatch.setattr(
            "voting.handlers.views.get_payment_gateway", lambda: ApprovingGateway()
        )

        response = api_client.post(
            "/api/join-submissions",
            {
                "competition_id": competition_id,
                "applicant": self.APPLICANT,
                "payment_token": self.TOKEN,
            },
        )

        assert response.status_code == 201
        assert response.json()["amount_paid_cents"] == 2500
        assert response.json()["transaction_id"] == "txn-1"

    def test_declined_payment_stores_nothing(self, api_client, competition_id, monkeypatch):
        api_client.put("/api/platform-settings", {"join_fee_cents": 2500})
        monkeypatch.setattr(
            "voting.handlers.views.get_payment_gateway", lambda: DecliningGateway()
        )

        response = api_client.post(
            "/api/join-submissions",
            {
                "competition_id": competition_id,
                "applicant": self.APPLICANT,
                "payment_token": self.TOKEN,
            },
        )

        assert response.status_code == 402
        assert response.json() == {
            "code": "PAYMENT_FAILED",
            "message": "Payment failed: Card declined",
        }
        assert Submission.objects.count() == 0

    def test_host_submission(self, api_client):
        response = api_client.post(
            "/api/host-submissions",
            {"applicant": self.APPLICANT, "event_name": "Summer Slam"},
        )

        assert response.status_code == 201
        assert response.json()["competition_id"] is None
        assert response.json()["details"]["event_name"] == "Summer Slam"

    def test_nomination_requires_nominator(self, api_client, competition_id):
        response = api_client.post(
            "/api/nominations",
            {"competition_id": competition_id, "nominee": self.APPLICANT},
        )

        assert response.status_code == 400
        assert Submission.objects.count() == 0

    def test_nomination_review(self, api_client, competition_id):
        nomination = api_client.post(
            "/api/nominations",
            {
                "competition_id": competition_id,
                "nominee": self.APPLICANT,
                "nominator": {"full_name": "Riley Fan", "email": "riley@example.com"},
                "chosen_nonprofit": "Food Bank",
            },
        ).json()
        assert nomination["nomination_status"] == "pending"
        assert nomination["nominator"]["full_name"] == "Riley Fan"

        outcome = api_client.patch(
            f"/api/submissions/{nomination['id']}/nomination-status",
            {"status": "not_interested"},
        )
        review = api_client.patch(
            f"/api/submissions/{nomination['id']}/status", {"status": "approved"}
        )

        assert outcome.json()["nomination_status"] == "not_interested"
        assert review.json()["status"] == "approved"
        assert review.json()["nomination_status"] == "not_interested"

    def test_list_submissions_by_kind(self, api_client, competition_id):
        api_client.post(
            "/api/join-submissions",
            {"competition_id": competition_id, "applicant": self.APPLICANT},
        )
        api_client.post(
            "/api/host-submissions",
            {"applicant": self.APPLICANT, "event_name": "Summer Slam"},
        )

        response = api_client.get("/api/submissions", {"kind": "host"})

        assert response.status_code == 200
        assert [s["kind"] for s in response.json()] == ["host"]

    def test_closed_intake_conflicts(self, api_client):
        api_client.put("/api/platform-settings", {"host_open": False})

        response = api_client.post(
            "/api/host-submissions",
            {"applicant": self.APPLICANT, "event_name": "Summer Slam"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INTAKE_CLOSED"


@pytest.mark.django_db
class TestPlatformSettingsEndpoint:
    """Tests for GET|PUT /api/platform-settings."""

    def test_defaults_without_row(self, api_client):
        response = api_client.get("/api/platform-settings")

        assert response.status_code == 200
        assert response.json()["free_votes_per_day"] == 5
        assert response.json()["sales_tax_percent"] == 0.0

    def test_default_vote_packages(self, api_client):
        packages = api_client.get("/api/platform-settings").json()["vote_packages"]

        assert [p["name"] for p in packages] == ["Starter Pack", "Fan Pack", "Super Fan Pack"]
        assert packages[1]["total_votes"] == 1300

    def test_partial_update(self, api_client):
        response = api_client.put(
            "/api/platform-settings",
            {
                "free_votes_per_day": 3,
                "vote_packages": [
                    {"name": "Fan pack", "vote_count": 10, "bonus_votes": 2, "price_cents": 1000}
                ],
            },
        )

        assert response.status_code == 200
        data = api_client.get("/api/platform-settings").json()
        assert data["free_votes_per_day"] == 3
        assert data["vote_packages"][0]["total_votes"] == 12
        assert data["vote_price_cents"] == 100

    def test_out_of_range_tax_rejected(self, api_client):
        response = api_client.put("/api/platform-settings", {"sales_tax_percent": "150"})

        assert response.status_code == 400
