"""
Permission System Constants and Definitions

Centralized permission definitions and the single authorization predicate
used by every protected route (see decorators.require_permission).

DESIGN PRINCIPLES:
- Permissions are granular (one action per permission)
- Roles map to fixed permission sets; there are no per-user overrides
- Admin has all permissions
- Staff can look things up and ring up sales, nothing destructive
"""
from __future__ import annotations


class Role:
    ADMIN = "admin"
    STAFF = "staff"


ALL_ROLES = (Role.ADMIN, Role.STAFF)


class PermissionCategory:
    """Permission categories for organization."""
    INVENTORY = "INVENTORY"
    SALES = "SALES"
    REPORTS = "REPORTS"
    USERS = "USERS"
    SYSTEM = "SYSTEM"


# Each permission is defined as: (code, name, description, category)
PERMISSION_DEFINITIONS = [
    # INVENTORY PERMISSIONS
    (
        "VIEW_INVENTORY",
        "View Inventory",
        "List products, stock levels and categories",
        PermissionCategory.INVENTORY
    ),
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Create, update and delete products (including restocking)",
        PermissionCategory.INVENTORY
    ),
    (
        "MANAGE_CATEGORIES",
        "Manage Categories",
        "Add and remove entries in the category catalog",
        PermissionCategory.INVENTORY
    ),

    # SALES PERMISSIONS
    (
        "VIEW_SALES",
        "View Sales",
        "List recorded sales",
        PermissionCategory.SALES
    ),
    (
        "CREATE_SALE",
        "Record Sale",
        "Record a sale against a product (decrements stock)",
        PermissionCategory.SALES
    ),

    # REPORT PERMISSIONS
    (
        "VIEW_REPORTS",
        "View Reports",
        "View dashboard totals, revenue and profit",
        PermissionCategory.REPORTS
    ),
    (
        "VIEW_LOW_STOCK",
        "View Low Stock",
        "View the low-stock panel and report",
        PermissionCategory.REPORTS
    ),

    # USER PERMISSIONS
    (
        "MANAGE_USERS",
        "Manage Users",
        "List and create user accounts",
        PermissionCategory.USERS
    ),

    # SYSTEM PERMISSIONS
    (
        "VIEW_SETTINGS",
        "View Settings",
        "Read store settings",
        PermissionCategory.SYSTEM
    ),
    (
        "MANAGE_SETTINGS",
        "Manage Settings",
        "Change store settings",
        PermissionCategory.SYSTEM
    ),
]

ALL_PERMISSION_CODES = frozenset(perm[0] for perm in PERMISSION_DEFINITIONS)

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    Role.ADMIN: ALL_PERMISSION_CODES,
    Role.STAFF: frozenset({
        "VIEW_INVENTORY",
        "VIEW_SALES",
        "CREATE_SALE",
        "VIEW_REPORTS",
        "VIEW_SETTINGS",
    }),
}


def get_role_permissions(role: str | None) -> frozenset[str]:
    """Unknown roles get nothing (fail closed)."""
    return ROLE_PERMISSIONS.get(role or "", frozenset())


def has_permission(user, permission_code: str) -> bool:
    """
    The authorization predicate.

    Inactive or missing users hold no permissions regardless of role.
    """
    if user is None or not getattr(user, "is_active", False):
        return False
    return permission_code in get_role_permissions(user.role)


def get_permission_definition(code: str) -> dict | None:
    """Get full definition for a permission code."""
    for perm in PERMISSION_DEFINITIONS:
        if perm[0] == code:
            return {
                "code": perm[0],
                "name": perm[1],
                "description": perm[2],
                "category": perm[3],
            }
    return None
