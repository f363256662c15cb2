# Overview: Service-layer operations for permission; encapsulates business logic and database work.

"""
Permission Checking and Security Event Logging

DESIGN PRINCIPLES:
- Fail closed: Deny by default, require explicit permission grant
- Log denials only: Permission grants are not logged
"""

from flask import current_app

from ..extensions import db
from ..models import SecurityEvent, User
from ..permissions import get_role_permissions, has_permission


class PermissionDeniedError(Exception):
    """Raised when user lacks required permission."""
    pass


def log_security_event(
    user_id: int | None,
    event_type: str,
    success: bool,
    resource: str | None = None,
    action: str | None = None,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> SecurityEvent:
    """
    Log security event to audit trail.

    event_type examples:
    - PERMISSION_DENIED
    - LOGIN_FAILED
    """
    event = SecurityEvent(
        user_id=user_id,
        event_type=event_type,
        success=success,
        resource=resource,
        action=action,
        reason=reason,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.session.add(event)
    db.session.commit()
    return event


def get_user_permissions(user: User) -> set[str]:
    """Permission codes the user currently holds (empty when inactive)."""
    if not user.is_active:
        return set()
    return set(get_role_permissions(user.role))


def require_permission(
    user: User,
    permission_code: str,
    resource: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> None:
    """
    Raise PermissionDeniedError unless the user holds the permission.

    Denials are written to security_events and the app log.
    """
    if has_permission(user, permission_code):
        return

    current_app.logger.warning(
        "Permission denied: user=%s role=%s permission=%s resource=%s",
        user.username, user.role, permission_code, resource,
    )
    log_security_event(
        user_id=user.id,
        event_type="PERMISSION_DENIED",
        success=False,
        resource=resource,
        action=permission_code,
        reason=f"Missing permission: {permission_code}",
        ip_address=ip_address,
        user_agent=user_agent,
    )
    raise PermissionDeniedError(f"Missing permission: {permission_code}")
