import logging
from typing import Optional

from django.db import transaction

from hms.models import ActivityLog, User

logger = logging.getLogger(__name__)


def log_activity(*, user: Optional[User], action: str, module: str, record_id=None, description: str = '') -> Optional[ActivityLog]:
    """Write an activity row. Failures are logged and swallowed so that the
    surrounding mutation is never rolled back because of the audit trail."""
    try:
        # savepoint: a failed insert must not poison the caller's transaction
        with transaction.atomic():
            return ActivityLog.objects.create(
                user=user if getattr(user, 'pk', None) else None,
                action=action,
                module=module,
                record_id=str(record_id) if record_id is not None else None,
                description=description or '',
            )
    except Exception:
        logger.exception('failed to write activity log %s/%s', module, action)
        return None
