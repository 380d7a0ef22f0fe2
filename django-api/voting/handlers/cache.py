"""Read-side cache for leaderboards, breakdowns and revenue reports.

Entries are short-lived and dropped by signals when the underlying rows
change. Writes never read from here.
"""

from typing import Any, Callable

from django.conf import settings
from django.core.cache import cache

SETTINGS_VERSION_KEY = "voting:settings-version"


def _settings_version() -> int:
    return cache.get_or_set(SETTINGS_VERSION_KEY, 1, timeout=None)


def breakdown_key(competition_id) -> str:
    return f"competitions:{competition_id}:breakdown"


def leaderboard_key(competition_id) -> str:
    return f"competitions:{competition_id}:leaderboard"


def revenue_key(competition_id) -> str:
    # Revenue depends on tax and tier settings as well as purchases.
    return f"competitions:{competition_id}:revenue:v{_settings_version()}"


def cached(key: str, compute: Callable[[], Any]) -> Any:
    data = cache.get(key)
    if data is None:
        data = compute()
        cache.set(key, data, settings.VOTING["READ_CACHE_SECONDS"])
    return data


def invalidate_competition(competition_id) -> None:
    cache.delete_many(
        [
            breakdown_key(competition_id),
            leaderboard_key(competition_id),
            revenue_key(competition_id),
        ]
    )


def invalidate_revenue_reports() -> None:
    """Drop every revenue report by moving to a new settings version."""
    try:
        cache.incr(SETTINGS_VERSION_KEY)
    except ValueError:
        cache.set(SETTINGS_VERSION_KEY, 2, timeout=None)
