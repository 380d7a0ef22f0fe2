import uuid

import django.core.validators
import django.db.models.deletion
import voting.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="HostingTier",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(max_length=100, unique=True)),
                ("price_cents", models.PositiveIntegerField()),
                ("max_contestants", models.PositiveIntegerField()),
                (
                    "revenue_share_percent",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["price_cents"],
            },
        ),
        migrations.CreateModel(
            name="PlatformSettings",
            fields=[
                (
                    "id",
                    models.PositiveSmallIntegerField(
                        default=1, primary_key=True, serialize=False
                    ),
                ),
                (
                    "sales_tax_percent",
                    models.DecimalField(decimal_places=2, default=0, max_digits=5),
                ),
                ("free_votes_per_day", models.PositiveIntegerField(default=5)),
                ("vote_price_cents", models.PositiveIntegerField(default=100)),
                (
                    "platform_fee_percent",
                    models.DecimalField(decimal_places=2, default=0, max_digits=5),
                ),
                (
                    "vote_packages",
                    models.JSONField(
                        blank=True, default=voting.models.default_vote_packages
                    ),
                ),
                ("join_open", models.BooleanField(default=True)),
                ("join_fee_cents", models.PositiveIntegerField(default=0)),
                ("host_open", models.BooleanField(default=True)),
                ("host_fee_cents", models.PositiveIntegerField(default=0)),
                ("nominations_enabled", models.BooleanField(default=True)),
                ("nomination_fee_cents", models.PositiveIntegerField(default=0)),
                ("nonprofit_required", models.BooleanField(default=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "platform settings",
            },
        ),
        migrations.CreateModel(
            name="Competition",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("category", models.CharField(max_length=100)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("active", "Active"),
                            ("completed", "Completed"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("host_id", models.CharField(blank=True, max_length=128, null=True)),
                ("starts_at", models.DateTimeField(blank=True, null=True)),
                ("ends_at", models.DateTimeField(blank=True, null=True)),
                ("start_date_tbd", models.BooleanField(default=False)),
                ("end_date_tbd", models.BooleanField(default=False)),
                ("voting_starts_at", models.DateTimeField(blank=True, null=True)),
                ("voting_ends_at", models.DateTimeField(blank=True, null=True)),
                ("max_votes_per_day", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "online_vote_weight",
                    models.PositiveSmallIntegerField(
                        default=100,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(100),
                        ],
                    ),
                ),
                ("in_person_only", models.BooleanField(default=False)),
                (
                    "expected_contestants",
                    models.PositiveIntegerField(blank=True, null=True),
                ),
                ("timezone", models.CharField(default="UTC", max_length=64)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="competitions",
                        to="voting.hostingtier",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "-created_at"],
                        name="comp_status_created_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("online_vote_weight__gte", 1),
                            ("online_vote_weight__lte", 100),
                        ),
                        name="competition_online_vote_weight_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Contestant",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("talent_profile_id", models.CharField(max_length=128)),
                ("display_name", models.CharField(max_length=255)),
                (
                    "application_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("applied_at", models.DateTimeField()),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contestants",
                        to="voting.competition",
                    ),
                ),
            ],
            options={
                "ordering": ["applied_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("competition", "talent_profile_id"),
                        name="contestant_unique_profile_per_competition",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Purchase",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("transaction_id", models.CharField(max_length=128, unique=True)),
                ("vote_count", models.PositiveIntegerField()),
                ("bonus_votes", models.PositiveIntegerField(default=0)),
                ("amount_cents", models.PositiveIntegerField()),
                ("purchased_at", models.DateTimeField()),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="purchases",
                        to="voting.competition",
                    ),
                ),
                (
                    "contestant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="purchases",
                        to="voting.contestant",
                    ),
                ),
            ],
            options={
                "ordering": ["purchased_at"],
                "indexes": [
                    models.Index(
                        fields=["competition", "purchased_at"],
                        name="purchase_comp_time_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Vote",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("online_free", "Online (free)"),
                            ("online_purchased", "Online (purchased)"),
                            ("in_person_qr", "In person (QR)"),
                        ],
                        max_length=20,
                    ),
                ),
                ("voter_identity", models.CharField(max_length=255)),
                (
                    "replay_key",
                    models.CharField(blank=True, max_length=64, null=True, unique=True),
                ),
                ("cast_at", models.DateTimeField()),
                ("voting_day", models.DateField()),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="voting.competition",
                    ),
                ),
                (
                    "contestant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="voting.contestant",
                    ),
                ),
                (
                    "purchase",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="voting.purchase",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["competition", "contestant", "source"],
                        name="vote_comp_contestant_src_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DailyQuotaUsage",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("voter_identity", models.CharField(max_length=255)),
                ("day", models.DateField()),
                ("used", models.PositiveIntegerField(default=0)),
                (
                    "competition",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quota_usage",
                        to="voting.competition",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("competition", "voter_identity", "day"),
                        name="quota_unique_voter_day",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("application", "Join application"),
                            ("host", "Host request"),
                            ("nomination", "Nomination"),
                        ],
                        max_length=20,
                    ),
                ),
                ("full_name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=40, null=True)),
                ("details", models.JSONField(blank=True, default=dict)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("amount_paid_cents", models.PositiveIntegerField(default=0)),
                (
                    "transaction_id",
                    models.CharField(blank=True, max_length=128, null=True),
                ),
                (
                    "nominator_name",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "nominator_email",
                    models.EmailField(blank=True, max_length=254, null=True),
                ),
                (
                    "nominator_phone",
                    models.CharField(blank=True, max_length=40, null=True),
                ),
                (
                    "nomination_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("pending", "Pending"),
                            ("joined", "Joined"),
                            ("unsure", "Unsure"),
                            ("not_interested", "Not interested"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "chosen_nonprofit",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("created_at", models.DateTimeField()),
                (
                    "competition",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="submissions",
                        to="voting.competition",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["kind", "-created_at"],
                        name="submission_kind_created_idx",
                    ),
                ],
            },
        ),
    ]
