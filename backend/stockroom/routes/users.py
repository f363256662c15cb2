# Overview: Flask API routes for user management; parses input and returns JSON responses.

"""
User management routes (admin only).

Users are never deleted; there is no delete endpoint.
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_permission
from ..permissions import ALL_ROLES, PERMISSION_DEFINITIONS, Role, get_permission_definition, get_role_permissions
from ..services import auth_service
from ..validation import ConflictError, ValidationError

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_permission("MANAGE_USERS")
def list_users():
    return jsonify([user.to_dict() for user in auth_service.list_users()])


@users_bp.post("")
@require_auth
@require_permission("MANAGE_USERS")
def create_user():
    """
    Create a new user.

    Request body:
    - username: str (required)
    - password: str (required)
    - name: str (required)
    - role: "admin" | "staff" (default staff)
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        user = auth_service.create_user(
            username=data.get("username"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role") or Role.STAFF,
        )
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(user.to_dict()), 201


@users_bp.get("/permissions")
@require_auth
@require_permission("MANAGE_USERS")
def list_permissions():
    """Permission catalog plus the codes each role holds."""
    permissions = [get_permission_definition(perm[0]) for perm in PERMISSION_DEFINITIONS]
    roles = {role: sorted(get_role_permissions(role)) for role in ALL_ROLES}
    return jsonify({"permissions": permissions, "roles": roles}), 200
