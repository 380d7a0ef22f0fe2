"""Join, host and nomination intake workflow.

Submissions that carry a fee are persisted only after the gateway confirms
the charge. A failed or cancelled charge leaves no record behind.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from uuid import uuid4

from voting.domain import (
    ApplicationStatus,
    Money,
    NominationStatus,
    Person,
    PlatformSettings,
    Submission,
    SubmissionId,
    SubmissionKind,
)
from voting.domain.errors import (
    IntakeClosedError,
    InvalidStatusTransitionError,
    PaymentFailedError,
    PaymentRequiredError,
    SubmissionNotFoundError,
    ValidationError,
)
from voting.services.lookups import require_competition, submission_id, utcnow
from voting.services.payments import PaymentGateway, PaymentToken
from voting.stores.interfaces import CompetitionStore, SubmissionStore

logger = logging.getLogger(__name__)

NOMINATION_OUTCOMES = {
    NominationStatus.JOINED,
    NominationStatus.UNSURE,
    NominationStatus.NOT_INTERESTED,
}


def _person(person: Person, role: str) -> Person:
    if not person.full_name or not person.full_name.strip():
        raise ValidationError(f"{role} name is required")
    if not person.email or not person.email.strip():
        raise ValidationError(f"{role} email is required")
    return Person(
        full_name=person.full_name.strip(),
        email=person.email.strip().lower(),
        phone=person.phone or None,
    )


class SubmissionWorkflow:
    """Service for intake submissions and their review."""

    def __init__(
        self,
        store: SubmissionStore,
        competitions: CompetitionStore,
        gateway: PaymentGateway,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._competitions = competitions
        self._gateway = gateway
        self._clock = clock

    def submit_application(
        self,
        applicant: Person,
        competition_id: str,
        settings: PlatformSettings,
        payment_token: PaymentToken | None = None,
        details: dict | None = None,
    ) -> Submission:
        """Apply to join a competition as a contestant."""
        if not settings.join_open:
            raise IntakeClosedError("Join applications are currently closed")
        applicant = _person(applicant, "Applicant")
        competition = require_competition(self._competitions, competition_id)
        return self._submit(
            kind=SubmissionKind.APPLICATION,
            applicant=applicant,
            fee=settings.join_fee,
            payment_token=payment_token,
            description=f"Join competition application: {competition.title}",
            competition_id=competition.id,
            details=details or {},
        )

    def submit_host_request(
        self,
        applicant: Person,
        settings: PlatformSettings,
        payment_token: PaymentToken | None = None,
        details: dict | None = None,
    ) -> Submission:
        """Ask to host a competition. ``details`` must include ``event_name``."""
        if not settings.host_open:
            raise IntakeClosedError("Host applications are currently closed")
        applicant = _person(applicant, "Applicant")
        details = details or {}
        event_name = (details.get("event_name") or "").strip()
        if not event_name:
            raise ValidationError("Event name is required")
        return self._submit(
            kind=SubmissionKind.HOST,
            applicant=applicant,
            fee=settings.host_fee,
            payment_token=payment_token,
            description=f"Host event application: {event_name}",
            details={**details, "event_name": event_name},
        )

    def nominate(
        self,
        nominee: Person,
        nominator: Person,
        competition_id: str,
        settings: PlatformSettings,
        payment_token: PaymentToken | None = None,
        chosen_nonprofit: str | None = None,
        details: dict | None = None,
    ) -> Submission:
        """Nominate someone else for a competition.

        The chosen nonprofit is stored as given and never verified.
        """
        if not settings.nominations_enabled:
            raise IntakeClosedError("Nominations are currently closed")
        nominee = _person(nominee, "Nominee")
        nominator = _person(nominator, "Nominator")
        chosen_nonprofit = (chosen_nonprofit or "").strip() or None
        if settings.nonprofit_required and chosen_nonprofit is None:
            raise ValidationError("Please choose a nonprofit")
        competition = require_competition(self._competitions, competition_id)
        return self._submit(
            kind=SubmissionKind.NOMINATION,
            applicant=nominee,
            fee=settings.nomination_fee,
            payment_token=payment_token,
            description=f"Nomination for {competition.title}",
            competition_id=competition.id,
            details=details or {},
            nominator=nominator,
            nomination_status=NominationStatus.PENDING,
            chosen_nonprofit=chosen_nonprofit,
        )

    def get_submission(self, raw_id: str) -> Submission:
        parsed = submission_id(raw_id)
        submission = self._store.get_submission(parsed)
        if submission is None:
            raise SubmissionNotFoundError(str(parsed))
        return submission

    def list_submissions(self, kind: str | None = None) -> list[Submission]:
        if kind is None:
            return self._store.list_submissions()
        try:
            return self._store.list_submissions(SubmissionKind(kind))
        except ValueError:
            raise ValidationError(f"Unknown submission kind: {kind}") from None

    def set_status(self, raw_id: str, status: str) -> Submission:
        """Approve or reject a pending submission."""
        submission = self.get_submission(raw_id)
        try:
            requested = ApplicationStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status: {status}") from None
        if (
            submission.status is not ApplicationStatus.PENDING
            or requested is ApplicationStatus.PENDING
        ):
            raise InvalidStatusTransitionError(submission.status.value, requested.value)
        updated = replace(submission, status=requested)
        self._store.save_submission(updated)
        logger.info("Submission %s %s", submission.id, requested.value)
        return updated

    def set_nomination_status(self, raw_id: str, status: str) -> Submission:
        """Record what came of a nomination. Independent of approval status."""
        submission = self.get_submission(raw_id)
        if submission.kind is not SubmissionKind.NOMINATION:
            raise ValidationError("Only nominations have a nomination status")
        try:
            requested = NominationStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown nomination status: {status}") from None
        if requested not in NOMINATION_OUTCOMES:
            current = submission.nomination_status or NominationStatus.PENDING
            raise InvalidStatusTransitionError(current.value, requested.value)
        updated = replace(submission, nomination_status=requested)
        self._store.save_submission(updated)
        return updated

    def _submit(
        self,
        kind: SubmissionKind,
        applicant: Person,
        fee: Money,
        payment_token: PaymentToken | None,
        description: str,
        **fields,
    ) -> Submission:
        transaction_id = None
        amount_paid = Money(0)
        if fee.cents > 0:
            if payment_token is None:
                raise PaymentRequiredError()
            try:
                confirmation = self._gateway.charge(
                    payment_token,
                    fee,
                    description,
                    email=applicant.email,
                    name=applicant.full_name,
                )
            except PaymentFailedError as exc:
                logger.warning("%s payment failed: %s", kind.value, exc.message)
                raise
            transaction_id = confirmation.transaction_id
            amount_paid = confirmation.amount

        submission = Submission(
            id=SubmissionId(uuid4()),
            kind=kind,
            applicant=applicant,
            status=ApplicationStatus.PENDING,
            amount_paid=amount_paid,
            created_at=self._clock(),
            transaction_id=transaction_id,
            **fields,
        )
        self._store.add_submission(submission)
        logger.info("%s submitted: id=%s paid=%d", kind.value, submission.id, amount_paid.cents)
        return submission
