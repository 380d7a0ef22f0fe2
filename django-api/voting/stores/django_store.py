"""Django ORM implementation of the stores."""

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Iterator

from django.db import IntegrityError, transaction
from django.db.models import Count

from voting import models
from voting.domain import (
    ApplicationStatus,
    Competition,
    CompetitionId,
    CompetitionStatus,
    Contestant,
    ContestantId,
    ContestantTally,
    HostingTier,
    Money,
    NominationStatus,
    Percentage,
    Person,
    PlatformSettings,
    Purchase,
    Submission,
    SubmissionId,
    SubmissionKind,
    TierId,
    Vote,
    VotePackage,
    VoteSource,
    VoteWeight,
)
from voting.domain.errors import DuplicateTransactionError
from voting.stores.interfaces import (
    CompetitionStore,
    QuotaCounter,
    SettingsStore,
    SubmissionStore,
    VoteLedgerStore,
)

BULK_BATCH_SIZE = 500


def _tier_to_domain(row: models.HostingTier) -> HostingTier:
    return HostingTier(
        id=TierId(row.id),
        name=row.name,
        price=Money(row.price_cents),
        max_contestants=row.max_contestants,
        revenue_share=Percentage(Decimal(row.revenue_share_percent)),
    )


def _competition_to_domain(row: models.Competition) -> Competition:
    return Competition(
        id=CompetitionId(row.id),
        title=row.title,
        category=row.category,
        status=CompetitionStatus(row.status),
        online_vote_weight=VoteWeight(row.online_vote_weight),
        in_person_only=row.in_person_only,
        max_votes_per_day=row.max_votes_per_day,
        timezone=row.timezone,
        created_at=row.created_at,
        host_id=row.host_id,
        tier=_tier_to_domain(row.tier) if row.tier_id else None,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        start_date_tbd=row.start_date_tbd,
        end_date_tbd=row.end_date_tbd,
        voting_starts_at=row.voting_starts_at,
        voting_ends_at=row.voting_ends_at,
        expected_contestants=row.expected_contestants,
    )


def _contestant_to_domain(row: models.Contestant) -> Contestant:
    return Contestant(
        id=ContestantId(row.id),
        competition_id=CompetitionId(row.competition_id),
        talent_profile_id=row.talent_profile_id,
        display_name=row.display_name,
        application_status=ApplicationStatus(row.application_status),
        applied_at=row.applied_at,
    )


def _purchase_to_domain(row: models.Purchase) -> Purchase:
    return Purchase(
        transaction_id=row.transaction_id,
        competition_id=CompetitionId(row.competition_id),
        contestant_id=ContestantId(row.contestant_id),
        vote_count=row.vote_count,
        bonus_votes=row.bonus_votes,
        amount=Money(row.amount_cents),
        purchased_at=row.purchased_at,
    )


def _submission_to_domain(row: models.Submission) -> Submission:
    nominator = None
    if row.nominator_name or row.nominator_email:
        nominator = Person(
            full_name=row.nominator_name or "",
            email=row.nominator_email or "",
            phone=row.nominator_phone,
        )
    return Submission(
        id=SubmissionId(row.id),
        kind=SubmissionKind(row.kind),
        applicant=Person(full_name=row.full_name, email=row.email, phone=row.phone),
        status=ApplicationStatus(row.status),
        amount_paid=Money(row.amount_paid_cents),
        created_at=row.created_at,
        competition_id=CompetitionId(row.competition_id) if row.competition_id else None,
        transaction_id=row.transaction_id,
        details=dict(row.details or {}),
        nominator=nominator,
        nomination_status=(
            NominationStatus(row.nomination_status) if row.nomination_status else None
        ),
        chosen_nonprofit=row.chosen_nonprofit,
    )


class DjangoCompetitionStore(CompetitionStore):
    """PostgreSQL-backed competition store using Django ORM."""

    def get_competition(self, competition_id: CompetitionId) -> Competition | None:
        row = (
            models.Competition.objects.select_related("tier")
            .filter(pk=competition_id.value)
            .first()
        )
        return _competition_to_domain(row) if row else None

    def save_competition(self, competition: Competition) -> None:
        models.Competition.objects.update_or_create(
            pk=competition.id.value,
            defaults={
                "title": competition.title,
                "category": competition.category,
                "status": competition.status.value,
                "host_id": competition.host_id,
                "tier_id": competition.tier.id.value if competition.tier else None,
                "starts_at": competition.starts_at,
                "ends_at": competition.ends_at,
                "start_date_tbd": competition.start_date_tbd,
                "end_date_tbd": competition.end_date_tbd,
                "voting_starts_at": competition.voting_starts_at,
                "voting_ends_at": competition.voting_ends_at,
                "max_votes_per_day": competition.max_votes_per_day,
                "online_vote_weight": competition.online_vote_weight.value,
                "in_person_only": competition.in_person_only,
                "expected_contestants": competition.expected_contestants,
                "timezone": competition.timezone,
                "created_at": competition.created_at,
            },
        )

    def delete_competition(self, competition_id: CompetitionId) -> bool:
        deleted, _ = models.Competition.objects.filter(pk=competition_id.value).delete()
        return deleted > 0

    def list_tiers(self) -> list[HostingTier]:
        return [_tier_to_domain(row) for row in models.HostingTier.objects.order_by("price_cents")]

    def get_tier(self, tier_id: TierId) -> HostingTier | None:
        row = models.HostingTier.objects.filter(pk=tier_id.value).first()
        return _tier_to_domain(row) if row else None

    def get_contestant(self, contestant_id: ContestantId) -> Contestant | None:
        row = models.Contestant.objects.filter(pk=contestant_id.value).first()
        return _contestant_to_domain(row) if row else None

    def find_contestant(
        self, competition_id: CompetitionId, talent_profile_id: str
    ) -> Contestant | None:
        row = models.Contestant.objects.filter(
            competition_id=competition_id.value, talent_profile_id=talent_profile_id
        ).first()
        return _contestant_to_domain(row) if row else None

    def list_contestants(self, competition_id: CompetitionId) -> list[Contestant]:
        rows = models.Contestant.objects.filter(competition_id=competition_id.value)
        return [_contestant_to_domain(row) for row in rows.order_by("applied_at")]

    def save_contestant(self, contestant: Contestant) -> None:
        models.Contestant.objects.update_or_create(
            pk=contestant.id.value,
            defaults={
                "competition_id": contestant.competition_id.value,
                "talent_profile_id": contestant.talent_profile_id,
                "display_name": contestant.display_name,
                "application_status": contestant.application_status.value,
                "applied_at": contestant.applied_at,
            },
        )


class DjangoVoteLedgerStore(VoteLedgerStore):
    """Vote ledger backed by the votes, purchases and quota tables."""

    @contextmanager
    def locked_quota(
        self, competition_id: CompetitionId, voter_identity: str, day: date
    ) -> Iterator[QuotaCounter]:
        with transaction.atomic():
            row, _ = models.DailyQuotaUsage.objects.get_or_create(
                competition_id=competition_id.value,
                voter_identity=voter_identity,
                day=day,
            )
            row = models.DailyQuotaUsage.objects.select_for_update().get(pk=row.pk)
            counter = QuotaCounter(used=row.used)
            yield counter
            if counter.used != row.used:
                row.used = counter.used
                row.save(update_fields=["used"])

    def quota_used(
        self, competition_id: CompetitionId, voter_identity: str, day: date
    ) -> int:
        row = models.DailyQuotaUsage.objects.filter(
            competition_id=competition_id.value, voter_identity=voter_identity, day=day
        ).first()
        return row.used if row else 0

    def find_replay(self, replay_key: str) -> str | None:
        vote_id = (
            models.Vote.objects.filter(replay_key=replay_key)
            .values_list("id", flat=True)
            .first()
        )
        return str(vote_id) if vote_id else None

    def append_vote(self, vote: Vote) -> None:
        models.Vote.objects.create(
            id=vote.id,
            competition_id=vote.competition_id.value,
            contestant_id=vote.contestant_id.value,
            source=vote.source.value,
            voter_identity=vote.voter_identity,
            replay_key=vote.replay_key,
            cast_at=vote.cast_at,
            voting_day=vote.voting_day,
        )

    def has_transaction(self, transaction_id: str) -> bool:
        return models.Purchase.objects.filter(transaction_id=transaction_id).exists()

    def credit_purchase(self, purchase: Purchase, voting_day: date) -> None:
        if self.has_transaction(purchase.transaction_id):
            raise DuplicateTransactionError(purchase.transaction_id)
        try:
            with transaction.atomic():
                row = models.Purchase.objects.create(
                    transaction_id=purchase.transaction_id,
                    competition_id=purchase.competition_id.value,
                    contestant_id=purchase.contestant_id.value,
                    vote_count=purchase.vote_count,
                    bonus_votes=purchase.bonus_votes,
                    amount_cents=purchase.amount.cents,
                    purchased_at=purchase.purchased_at,
                )
                models.Vote.objects.bulk_create(
                    (
                        models.Vote(
                            competition_id=row.competition_id,
                            contestant_id=row.contestant_id,
                            source=models.Vote.Source.ONLINE_PURCHASED,
                            voter_identity=f"purchase:{row.transaction_id}",
                            purchase=row,
                            cast_at=row.purchased_at,
                            voting_day=voting_day,
                        )
                        for _ in range(purchase.total_votes)
                    ),
                    batch_size=BULK_BATCH_SIZE,
                )
        except IntegrityError as exc:
            # Concurrent redelivery of the same payment callback.
            if self.has_transaction(purchase.transaction_id):
                raise DuplicateTransactionError(purchase.transaction_id) from exc
            raise

    def tallies(self, competition_id: CompetitionId) -> dict[ContestantId, ContestantTally]:
        rows = (
            models.Vote.objects.filter(competition_id=competition_id.value)
            .values("contestant_id", "source")
            .annotate(n=Count("id"))
            .order_by()
        )
        counts: dict[ContestantId, dict[str, int]] = {}
        for row in rows:
            per_source = counts.setdefault(ContestantId(row["contestant_id"]), {})
            per_source[row["source"]] = row["n"]
        return {
            contestant_id: ContestantTally(
                contestant_id=contestant_id,
                free=per_source.get(VoteSource.ONLINE_FREE.value, 0),
                purchased=per_source.get(VoteSource.ONLINE_PURCHASED.value, 0),
                in_person=per_source.get(VoteSource.IN_PERSON_QR.value, 0),
            )
            for contestant_id, per_source in counts.items()
        }

    def list_purchases(self, competition_id: CompetitionId) -> list[Purchase]:
        rows = models.Purchase.objects.filter(competition_id=competition_id.value)
        return [_purchase_to_domain(row) for row in rows.order_by("purchased_at")]


class DjangoSettingsStore(SettingsStore):
    """Platform settings singleton row."""

    def load_settings(self) -> PlatformSettings:
        row = models.PlatformSettings.objects.filter(
            pk=models.PlatformSettings.SINGLETON_ID
        ).first()
        if row is None:
            return PlatformSettings()
        return PlatformSettings(
            sales_tax=Percentage(Decimal(row.sales_tax_percent)),
            free_votes_per_day=row.free_votes_per_day,
            vote_price=Money(row.vote_price_cents),
            platform_fee=Percentage(Decimal(row.platform_fee_percent)),
            vote_packages=tuple(
                VotePackage(
                    name=p["name"],
                    vote_count=int(p["vote_count"]),
                    bonus_votes=int(p.get("bonus_votes", 0)),
                    price=Money(int(p["price_cents"])),
                )
                for p in row.vote_packages or []
            ),
            join_open=row.join_open,
            join_fee=Money(row.join_fee_cents),
            host_open=row.host_open,
            host_fee=Money(row.host_fee_cents),
            nominations_enabled=row.nominations_enabled,
            nomination_fee=Money(row.nomination_fee_cents),
            nonprofit_required=row.nonprofit_required,
        )

    def save_settings(self, settings: PlatformSettings) -> None:
        models.PlatformSettings.objects.update_or_create(
            pk=models.PlatformSettings.SINGLETON_ID,
            defaults={
                "sales_tax_percent": settings.sales_tax.value,
                "free_votes_per_day": settings.free_votes_per_day,
                "vote_price_cents": settings.vote_price.cents,
                "platform_fee_percent": settings.platform_fee.value,
                "vote_packages": [
                    {
                        "name": p.name,
                        "vote_count": p.vote_count,
                        "bonus_votes": p.bonus_votes,
                        "price_cents": p.price.cents,
                    }
                    for p in settings.vote_packages
                ],
                "join_open": settings.join_open,
                "join_fee_cents": settings.join_fee.cents,
                "host_open": settings.host_open,
                "host_fee_cents": settings.host_fee.cents,
                "nominations_enabled": settings.nominations_enabled,
                "nomination_fee_cents": settings.nomination_fee.cents,
                "nonprofit_required": settings.nonprofit_required,
            },
        )


class DjangoSubmissionStore(SubmissionStore):
    """Join, host and nomination submissions."""

    def _fields(self, submission: Submission) -> dict:
        nominator = submission.nominator
        return {
            "kind": submission.kind.value,
            "competition_id": (
                submission.competition_id.value if submission.competition_id else None
            ),
            "full_name": submission.applicant.full_name,
            "email": submission.applicant.email,
            "phone": submission.applicant.phone,
            "details": submission.details,
            "status": submission.status.value,
            "amount_paid_cents": submission.amount_paid.cents,
            "transaction_id": submission.transaction_id,
            "nominator_name": nominator.full_name if nominator else None,
            "nominator_email": nominator.email if nominator else None,
            "nominator_phone": nominator.phone if nominator else None,
            "nomination_status": (
                submission.nomination_status.value if submission.nomination_status else None
            ),
            "chosen_nonprofit": submission.chosen_nonprofit,
            "created_at": submission.created_at,
        }

    def add_submission(self, submission: Submission) -> None:
        models.Submission.objects.create(id=submission.id.value, **self._fields(submission))

    def save_submission(self, submission: Submission) -> None:
        models.Submission.objects.filter(pk=submission.id.value).update(
            **self._fields(submission)
        )

    def get_submission(self, submission_id: SubmissionId) -> Submission | None:
        row = models.Submission.objects.filter(pk=submission_id.value).first()
        return _submission_to_domain(row) if row else None

    def list_submissions(self, kind: SubmissionKind | None = None) -> list[Submission]:
        rows = models.Submission.objects.all()
        if kind is not None:
            rows = rows.filter(kind=kind.value)
        return [_submission_to_domain(row) for row in rows.order_by("-created_at")]
