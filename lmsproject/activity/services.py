import logging

from .models import ActivityLog

logger = logging.getLogger(__name__)


def log_activity(user, activity_type, resource_id, resource_type):
    """Append an activity row for ``user`` in their own tenant."""
    entry = ActivityLog.objects.create(
        user=user,
        tenant_id=user.tenant_id,
        activity_type=activity_type,
        resource_id=resource_id or 0,
        resource_type=resource_type,
    )
    logger.debug("activity %s by user %s on %s#%s", activity_type, user.id, resource_type, resource_id)
    return entry
