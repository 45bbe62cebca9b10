"""
Cache invalidation and live refresh for the dashboard sections.

After a mutation the cached aggregates of the affected sections are
dropped and, once the transaction commits, a ``broadcast.refresh`` event
is pushed to the ``updates`` channel group so that open screens reload.
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

logger = logging.getLogger(__name__)

UPDATES_GROUP = 'updates'
DASHBOARD_CACHE_KEY = 'dashboard:stats'

SECTION_KEYS = {
    'dashboard': [DASHBOARD_CACHE_KEY],
}


def broadcast(sections):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {
        'type': 'broadcast.refresh',
        'version': int(now.timestamp()),
        'ts': now.isoformat(),
        'keys': list(sections),
    }
    try:
        async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    except Exception:
        logger.warning('refresh broadcast failed for %s', sections, exc_info=True)


def revalidate(*sections: str) -> None:
    """Drop cached data for ``sections`` and announce the change after commit."""
    keys = [k for s in sections for k in SECTION_KEYS.get(s, [])]
    if keys:
        cache.delete_many(keys)
    logger.debug('revalidate %s', sections)
    transaction.on_commit(lambda: broadcast(sections))
