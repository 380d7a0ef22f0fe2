"""Django signals for cache invalidation.

Invalidation runs after commit. Votes and purchases only hook post_save;
their deletes happen through the competition cascade.
"""

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from voting.handlers.cache import invalidate_competition, invalidate_revenue_reports
from voting.models import (
    Competition,
    Contestant,
    HostingTier,
    PlatformSettings,
    Purchase,
    Vote,
)


def _invalidate_on_commit(competition_id) -> None:
    transaction.on_commit(lambda: invalidate_competition(competition_id))


@receiver([post_save, post_delete], sender=Competition)
def invalidate_competition_cache(sender, instance, **kwargs):
    """Invalidate caches when a competition is saved or deleted."""
    _invalidate_on_commit(instance.pk)


@receiver([post_save, post_delete], sender=Contestant)
def invalidate_contestant_cache(sender, instance, **kwargs):
    """Invalidate the leaderboard when a contestant changes status."""
    _invalidate_on_commit(instance.competition_id)


@receiver(post_save, sender=Vote)
def invalidate_vote_cache(sender, instance, created, **kwargs):
    """Invalidate caches when a vote is appended."""
    _invalidate_on_commit(instance.competition_id)


@receiver(post_save, sender=Purchase)
def invalidate_purchase_cache(sender, instance, created, **kwargs):
    """Invalidate caches when a purchase is settled."""
    _invalidate_on_commit(instance.competition_id)


@receiver([post_save, post_delete], sender=PlatformSettings)
@receiver([post_save, post_delete], sender=HostingTier)
def invalidate_revenue_cache(sender, instance, **kwargs):
    """Invalidate every revenue report when tax or tier terms change."""
    transaction.on_commit(invalidate_revenue_reports)
