"""Serializers for request validation and domain model responses.

Request serializers check shape and enum values only. Business rules stay in
the services. Response serializers read straight from the frozen domain
models, so sources point at value object attributes.
"""

from decimal import Decimal

from rest_framework import serializers

from voting.domain import (
    ApplicationStatus,
    CompetitionStatus,
    NominationStatus,
    Person,
    VoteSource,
)
from voting.services.payments import PaymentToken

VOTE_SOURCE_CHOICES = [s.value for s in VoteSource]


# Requests


class PersonSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True)


def person_from(data: dict) -> Person:
    return Person(
        full_name=data["full_name"],
        email=data["email"],
        phone=data.get("phone") or None,
    )


class PaymentTokenSerializer(serializers.Serializer):
    descriptor = serializers.CharField(max_length=100)
    value = serializers.CharField()


def payment_token_from(data: dict | None) -> PaymentToken | None:
    if not data:
        return None
    return PaymentToken(descriptor=data["descriptor"], value=data["value"])


class VoteRequestSerializer(serializers.Serializer):
    contestant_id = serializers.CharField()
    source = serializers.ChoiceField(
        choices=VOTE_SOURCE_CHOICES, default=VoteSource.ONLINE_FREE.value
    )
    voter_identity = serializers.CharField(max_length=255)
    request_id = serializers.CharField(max_length=128, required=False, allow_blank=True)


class QrVoteRequestSerializer(serializers.Serializer):
    contestant_id = serializers.CharField()
    station_id = serializers.CharField(max_length=100)


class PurchaseSettlementSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=128)
    competition_id = serializers.CharField()
    contestant_id = serializers.CharField()
    vote_count = serializers.IntegerField(min_value=0)
    bonus_votes = serializers.IntegerField(min_value=0, default=0)
    amount_cents = serializers.IntegerField(min_value=0)


class CheckoutRequestSerializer(serializers.Serializer):
    competition_id = serializers.CharField()
    contestant_id = serializers.CharField()
    buyer = PersonSerializer()
    payment_token = PaymentTokenSerializer()
    package_index = serializers.IntegerField(min_value=0, required=False)
    vote_count = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):
        if ("package_index" in attrs) == ("vote_count" in attrs):
            raise serializers.ValidationError(
                "Provide exactly one of package_index or vote_count"
            )
        return attrs


class JoinSubmissionSerializer(serializers.Serializer):
    competition_id = serializers.CharField()
    applicant = PersonSerializer()
    payment_token = PaymentTokenSerializer(required=False)
    details = serializers.DictField(required=False)


class HostSubmissionSerializer(serializers.Serializer):
    applicant = PersonSerializer()
    event_name = serializers.CharField(max_length=200)
    payment_token = PaymentTokenSerializer(required=False)
    details = serializers.DictField(required=False)


class NominationRequestSerializer(serializers.Serializer):
    competition_id = serializers.CharField()
    nominee = PersonSerializer()
    nominator = PersonSerializer()
    payment_token = PaymentTokenSerializer(required=False)
    chosen_nonprofit = serializers.CharField(
        max_length=200, required=False, allow_blank=True
    )
    details = serializers.DictField(required=False)


class CompetitionStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in CompetitionStatus])


class ApplicationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in ApplicationStatus])


class NominationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in NominationStatus])


class CompetitionCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    category = serializers.CharField(max_length=100)
    host_id = serializers.CharField(max_length=64, required=False, allow_null=True)
    tier_id = serializers.CharField(required=False, allow_null=True)
    max_votes_per_day = serializers.IntegerField(
        min_value=1, required=False, allow_null=True
    )
    online_vote_weight = serializers.IntegerField(min_value=1, max_value=100, default=100)
    in_person_only = serializers.BooleanField(default=False)
    timezone = serializers.CharField(max_length=64, default="UTC")
    starts_at = serializers.DateTimeField(required=False, allow_null=True)
    ends_at = serializers.DateTimeField(required=False, allow_null=True)
    start_date_tbd = serializers.BooleanField(default=False)
    end_date_tbd = serializers.BooleanField(default=False)
    voting_starts_at = serializers.DateTimeField(required=False, allow_null=True)
    voting_ends_at = serializers.DateTimeField(required=False, allow_null=True)
    expected_contestants = serializers.IntegerField(
        min_value=1, required=False, allow_null=True
    )


class TierChangeSerializer(serializers.Serializer):
    tier_id = serializers.CharField()


class VotingRulesSerializer(serializers.Serializer):
    max_votes_per_day = serializers.IntegerField(
        min_value=1, required=False, allow_null=True
    )
    online_vote_weight = serializers.IntegerField(
        min_value=1, max_value=100, required=False
    )
    in_person_only = serializers.BooleanField(required=False)


class ContestantEntrySerializer(serializers.Serializer):
    talent_profile_id = serializers.CharField(max_length=64)
    display_name = serializers.CharField(max_length=200)
    approved = serializers.BooleanField(default=False)


class VotePackageInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    vote_count = serializers.IntegerField(min_value=1)
    bonus_votes = serializers.IntegerField(min_value=0, default=0)
    price_cents = serializers.IntegerField(min_value=0)


class PlatformSettingsUpdateSerializer(serializers.Serializer):
    sales_tax_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
    )
    platform_fee_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
    )
    free_votes_per_day = serializers.IntegerField(min_value=0, required=False)
    vote_price_cents = serializers.IntegerField(min_value=0, required=False)
    vote_packages = VotePackageInputSerializer(many=True, required=False)
    join_open = serializers.BooleanField(required=False)
    join_fee_cents = serializers.IntegerField(min_value=0, required=False)
    host_open = serializers.BooleanField(required=False)
    host_fee_cents = serializers.IntegerField(min_value=0, required=False)
    nominations_enabled = serializers.BooleanField(required=False)
    nomination_fee_cents = serializers.IntegerField(min_value=0, required=False)
    nonprofit_required = serializers.BooleanField(required=False)


# Responses


class HostingTierSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price_cents = serializers.IntegerField(source="price.cents")
    max_contestants = serializers.IntegerField()
    revenue_share_percent = serializers.DecimalField(
        source="revenue_share.value",
        max_digits=5,
        decimal_places=2,
        coerce_to_string=False,
    )


class CompetitionSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    category = serializers.CharField()
    status = serializers.CharField(source="status.value")
    host_id = serializers.CharField(allow_null=True)
    tier = HostingTierSerializer(allow_null=True)
    online_vote_weight = serializers.IntegerField(source="online_vote_weight.value")
    in_person_only = serializers.BooleanField()
    max_votes_per_day = serializers.IntegerField(allow_null=True)
    timezone = serializers.CharField()
    starts_at = serializers.DateTimeField(allow_null=True)
    ends_at = serializers.DateTimeField(allow_null=True)
    start_date_tbd = serializers.BooleanField()
    end_date_tbd = serializers.BooleanField()
    voting_starts_at = serializers.DateTimeField(allow_null=True)
    voting_ends_at = serializers.DateTimeField(allow_null=True)
    expected_contestants = serializers.IntegerField(allow_null=True)
    created_at = serializers.DateTimeField()


class ContestantSerializer(serializers.Serializer):
    id = serializers.CharField()
    competition_id = serializers.CharField()
    talent_profile_id = serializers.CharField()
    display_name = serializers.CharField()
    application_status = serializers.CharField(source="application_status.value")
    applied_at = serializers.DateTimeField()


class VoteReceiptSerializer(serializers.Serializer):
    accepted = serializers.BooleanField()
    vote_id = serializers.CharField(allow_null=True)
    duplicate = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)


class SettlementReceiptSerializer(serializers.Serializer):
    accepted = serializers.BooleanField()
    duplicate = serializers.BooleanField()
    votes_credited = serializers.IntegerField()


class CheckoutReceiptSerializer(serializers.Serializer):
    transaction_id = serializers.CharField()
    package_name = serializers.CharField()
    amount_cents = serializers.IntegerField(source="amount.cents")
    votes_credited = serializers.IntegerField()


class QuotaStatusSerializer(serializers.Serializer):
    used = serializers.IntegerField()
    cap = serializers.IntegerField()
    remaining = serializers.IntegerField()


class VoteBreakdownSerializer(serializers.Serializer):
    online = serializers.IntegerField()
    in_person = serializers.IntegerField()
    total = serializers.IntegerField()
    online_vote_weight = serializers.IntegerField()
    in_person_only = serializers.BooleanField()


class LeaderboardEntrySerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    contestant_id = serializers.CharField()
    display_name = serializers.CharField()
    online_votes = serializers.IntegerField()
    in_person_votes = serializers.IntegerField()
    weighted_votes = serializers.DecimalField(
        max_digits=20, decimal_places=2, coerce_to_string=False
    )
    vote_percentage = serializers.DecimalField(
        max_digits=4, decimal_places=1, coerce_to_string=False
    )


class LeaderboardSerializer(serializers.Serializer):
    competition_id = serializers.CharField()
    total_weighted_votes = serializers.DecimalField(
        max_digits=20, decimal_places=2, coerce_to_string=False
    )
    entries = LeaderboardEntrySerializer(many=True)


class RevenueReportSerializer(serializers.Serializer):
    competition_id = serializers.CharField()
    total_votes = serializers.IntegerField()
    total_purchased_votes = serializers.IntegerField()
    total_purchases = serializers.IntegerField()
    revenue_share_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, coerce_to_string=False
    )
    total_revenue_cents = serializers.IntegerField(source="split.gross.cents")
    tax_cents = serializers.IntegerField(source="split.tax.cents")
    net_revenue_cents = serializers.IntegerField(source="split.net.cents")
    host_share_cents = serializers.IntegerField(source="split.host_share.cents")
    platform_share_cents = serializers.IntegerField(source="split.platform_share.cents")


class VotePackageSerializer(serializers.Serializer):
    name = serializers.CharField()
    vote_count = serializers.IntegerField()
    bonus_votes = serializers.IntegerField()
    total_votes = serializers.IntegerField()
    price_cents = serializers.IntegerField(source="price.cents")


class PlatformSettingsSerializer(serializers.Serializer):
    sales_tax_percent = serializers.DecimalField(
        source="sales_tax.value", max_digits=5, decimal_places=2, coerce_to_string=False
    )
    platform_fee_percent = serializers.DecimalField(
        source="platform_fee.value",
        max_digits=5,
        decimal_places=2,
        coerce_to_string=False,
    )
    free_votes_per_day = serializers.IntegerField()
    vote_price_cents = serializers.IntegerField(source="vote_price.cents")
    vote_packages = VotePackageSerializer(many=True)
    join_open = serializers.BooleanField()
    join_fee_cents = serializers.IntegerField(source="join_fee.cents")
    host_open = serializers.BooleanField()
    host_fee_cents = serializers.IntegerField(source="host_fee.cents")
    nominations_enabled = serializers.BooleanField()
    nomination_fee_cents = serializers.IntegerField(source="nomination_fee.cents")
    nonprofit_required = serializers.BooleanField()


class PersonOutputSerializer(serializers.Serializer):
    full_name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField(allow_null=True)


class SubmissionSerializer(serializers.Serializer):
    id = serializers.CharField()
    kind = serializers.CharField(source="kind.value")
    competition_id = serializers.CharField(allow_null=True)
    applicant = PersonOutputSerializer()
    status = serializers.CharField(source="status.value")
    amount_paid_cents = serializers.IntegerField(source="amount_paid.cents")
    transaction_id = serializers.CharField(allow_null=True)
    details = serializers.DictField()
    nominator = PersonOutputSerializer(allow_null=True)
    nomination_status = serializers.CharField(
        source="nomination_status.value", allow_null=True
    )
    chosen_nonprofit = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
