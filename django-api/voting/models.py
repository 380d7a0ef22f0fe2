"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class HostingTier(models.Model):
    """Persistence model for hosting packages."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    price_cents = models.PositiveIntegerField()
    max_contestants = models.PositiveIntegerField()
    revenue_share_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["price_cents"]

    def __str__(self) -> str:
        return f"{self.name} ({self.revenue_share_percent}%)"


class Competition(models.Model):
    """Persistence model for competitions."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    host_id = models.CharField(max_length=128, blank=True, null=True)
    tier = models.ForeignKey(
        HostingTier,
        on_delete=models.PROTECT,
        related_name="competitions",
        blank=True,
        null=True,
    )
    starts_at = models.DateTimeField(blank=True, null=True)
    ends_at = models.DateTimeField(blank=True, null=True)
    start_date_tbd = models.BooleanField(default=False)
    end_date_tbd = models.BooleanField(default=False)
    voting_starts_at = models.DateTimeField(blank=True, null=True)
    voting_ends_at = models.DateTimeField(blank=True, null=True)
    max_votes_per_day = models.PositiveIntegerField(blank=True, null=True)
    online_vote_weight = models.PositiveSmallIntegerField(
        default=100,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
    )
    in_person_only = models.BooleanField(default=False)
    expected_contestants = models.PositiveIntegerField(blank=True, null=True)
    timezone = models.CharField(max_length=64, default="UTC")
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["status", "-created_at"],
                name="comp_status_created_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(online_vote_weight__gte=1, online_vote_weight__lte=100),
                name="competition_online_vote_weight_range",
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Contestant(models.Model):
    """Persistence model for contestant entries."""

    class ApplicationStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    competition = models.ForeignKey(
        Competition, on_delete=models.CASCADE, related_name="contestants"
    )
    talent_profile_id = models.CharField(max_length=128)
    display_name = models.CharField(max_length=255)
    application_status = models.CharField(
        max_length=20,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.PENDING,
    )
    applied_at = models.DateTimeField()

    class Meta:
        ordering = ["applied_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["competition", "talent_profile_id"],
                name="contestant_unique_profile_per_competition",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.display_name} - {self.competition.title}"


class Purchase(models.Model):
    """Persistence model for settled vote purchases."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    transaction_id = models.CharField(max_length=128, unique=True)
    competition = models.ForeignKey(
        Competition, on_delete=models.CASCADE, related_name="purchases"
    )
    contestant = models.ForeignKey(
        Contestant, on_delete=models.CASCADE, related_name="purchases"
    )
    vote_count = models.PositiveIntegerField()
    bonus_votes = models.PositiveIntegerField(default=0)
    amount_cents = models.PositiveIntegerField()
    purchased_at = models.DateTimeField()

    class Meta:
        ordering = ["purchased_at"]
        indexes = [
            models.Index(
                fields=["competition", "purchased_at"],
                name="purchase_comp_time_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.transaction_id} - {self.vote_count}+{self.bonus_votes} votes"


class Vote(models.Model):
    """Append-only vote event."""

    class Source(models.TextChoices):
        ONLINE_FREE = "online_free", "Online (free)"
        ONLINE_PURCHASED = "online_purchased", "Online (purchased)"
        IN_PERSON_QR = "in_person_qr", "In person (QR)"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    competition = models.ForeignKey(
        Competition, on_delete=models.CASCADE, related_name="votes"
    )
    contestant = models.ForeignKey(
        Contestant, on_delete=models.CASCADE, related_name="votes"
    )
    source = models.CharField(max_length=20, choices=Source.choices)
    voter_identity = models.CharField(max_length=255)
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        related_name="votes",
        blank=True,
        null=True,
    )
    replay_key = models.CharField(max_length=64, unique=True, blank=True, null=True)
    cast_at = models.DateTimeField()
    voting_day = models.DateField()

    class Meta:
        indexes = [
            models.Index(
                fields=["competition", "contestant", "source"],
                name="vote_comp_contestant_src_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.source} vote for {self.contestant_id}"


class DailyQuotaUsage(models.Model):
    """Free votes used per voter, competition and day.

    The unique row is locked with select_for_update while a free vote is
    checked and appended.
    """

    competition = models.ForeignKey(
        Competition, on_delete=models.CASCADE, related_name="quota_usage"
    )
    voter_identity = models.CharField(max_length=255)
    day = models.DateField()
    used = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["competition", "voter_identity", "day"],
                name="quota_unique_voter_day",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.voter_identity} {self.day}: {self.used}"


def default_vote_packages():
    return [
        {"name": "Starter Pack", "vote_count": 500, "bonus_votes": 0, "price_cents": 1000},
        {"name": "Fan Pack", "vote_count": 1000, "bonus_votes": 300, "price_cents": 1500},
        {"name": "Super Fan Pack", "vote_count": 2000, "bonus_votes": 600, "price_cents": 3000},
    ]


class PlatformSettings(models.Model):
    """Singleton row holding admin-editable platform settings."""

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID)
    sales_tax_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    free_votes_per_day = models.PositiveIntegerField(default=5)
    vote_price_cents = models.PositiveIntegerField(default=100)
    platform_fee_percent = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    vote_packages = models.JSONField(default=default_vote_packages, blank=True)
    join_open = models.BooleanField(default=True)
    join_fee_cents = models.PositiveIntegerField(default=0)
    host_open = models.BooleanField(default=True)
    host_fee_cents = models.PositiveIntegerField(default=0)
    nominations_enabled = models.BooleanField(default=True)
    nomination_fee_cents = models.PositiveIntegerField(default=0)
    nonprofit_required = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "platform settings"

    def __str__(self) -> str:
        return "Platform settings"


class Submission(models.Model):
    """Persistence model for join applications, host requests and nominations."""

    class Kind(models.TextChoices):
        APPLICATION = "application", "Join application"
        HOST = "host", "Host request"
        NOMINATION = "nomination", "Nomination"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    class NominationStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        JOINED = "joined", "Joined"
        UNSURE = "unsure", "Unsure"
        NOT_INTERESTED = "not_interested", "Not interested"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kind = models.CharField(max_length=20, choices=Kind.choices)
    competition = models.ForeignKey(
        Competition,
        on_delete=models.SET_NULL,
        related_name="submissions",
        blank=True,
        null=True,
    )
    full_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=40, blank=True, null=True)
    details = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    amount_paid_cents = models.PositiveIntegerField(default=0)
    transaction_id = models.CharField(max_length=128, blank=True, null=True)
    nominator_name = models.CharField(max_length=255, blank=True, null=True)
    nominator_email = models.EmailField(blank=True, null=True)
    nominator_phone = models.CharField(max_length=40, blank=True, null=True)
    nomination_status = models.CharField(
        max_length=20, choices=NominationStatus.choices, blank=True, null=True
    )
    chosen_nonprofit = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["kind", "-created_at"],
                name="submission_kind_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.kind}: {self.full_name}"
