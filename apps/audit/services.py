import logging
from .models import AuditLog

logger = logging.getLogger(__name__)


def record_action(request, action, resource_type=None, resource_id=None, data=None):
    """Store an audit row for an admin request; ``request`` may be None for system jobs"""
    user = None
    ip_address = None
    user_agent = None
    if request is not None:
        if request.user.is_authenticated:
            user = request.user
        ip_address = request.META.get('REMOTE_ADDR')
        user_agent = request.META.get('HTTP_USER_AGENT', '')

    log = AuditLog.objects.create(
        user=user,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        ip_address=ip_address,
        user_agent=user_agent,
        request_data=data,
    )
    logger.info(f"Audit: {action} {resource_type}:{resource_id} by {user or 'system'}")
    return log
