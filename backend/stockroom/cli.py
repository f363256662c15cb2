# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/stockroom/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--with-samples]
#   Idempotent bootstrap: creates tables, default admin/staff users and default settings.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role and active status.
# - python -m flask users create --username alice --name "Alice" --password "Password123!" --role staff
#   Create a user (prompts if options are omitted).
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions --retention-days 30
#   Delete expired/revoked sessions older than the retention window.

from decimal import Decimal

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Category, Product, User
from .permissions import ALL_ROLES, Role
from .services import session_service, settings_service
from .services.auth_service import create_user
from .validation import ConflictError, ValidationError

DEFAULT_PASSWORD = "Password123!"

SAMPLE_CATEGORIES = [
    ("Clothing", "Shirts, jackets and other apparel"),
    ("Footwear", "Shoes and boots"),
    ("Accessories", "Sunglasses, bags and small items"),
]

SAMPLE_PRODUCTS = [
    # (sku, name, category, price, cost, stock, description)
    ("TS-001", "Cotton T-Shirt", "Clothing", "19.99", "10.00", 42, "Comfortable cotton t-shirt"),
    ("DJ-002", "Denim Jacket", "Clothing", "89.99", "50.00", 12, "Stylish denim jacket"),
    ("RS-003", "Running Shoes", "Footwear", "129.95", "80.00", 3, "Performance running shoes"),
    ("SG-004", "Sunglasses", "Accessories", "29.95", "15.00", 0, "Classic sunglasses"),
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--with-samples', is_flag=True, help='Also load a small sample catalog')
@with_appcontext
def init_system(with_samples):
    """
    Initialize the store: tables, default users, default settings.

    Creates:
    - Users: admin (admin role) and staff (staff role)
    - All passwords default to: "Password123!"

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing Stockroom...")

    db.create_all()
    click.echo("PASS Tables created")

    for username, name, role in (
        ("admin", "Admin User", Role.ADMIN),
        ("staff", "Staff User", Role.STAFF),
    ):
        if db.session.query(User).filter_by(username=username).first():
            click.echo(f"PASS Using existing user: {username}")
            continue
        create_user(username=username, password=DEFAULT_PASSWORD, name=name, role=role)
        click.echo(f"PASS Created user: {username} ({role})")

    # Materialize defaults so they show up in store_settings
    settings_service.update_settings(settings_service.get_settings())
    click.echo("PASS Default settings stored")

    if with_samples:
        for name, description in SAMPLE_CATEGORIES:
            if not db.session.query(Category).filter_by(name=name).first():
                db.session.add(Category(name=name, description=description))
        for sku, name, category, price, cost, stock, description in SAMPLE_PRODUCTS:
            if db.session.query(Product).filter_by(sku=sku).first():
                continue
            db.session.add(Product(
                sku=sku,
                name=name,
                category=category,
                price=Decimal(price),
                cost=Decimal(cost),
                stock=stock,
                description=description,
            ))
        db.session.commit()
        click.echo("PASS Sample catalog loaded")

    click.echo("DONE Default password for seeded users: " + DEFAULT_PASSWORD)


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with role and active status."""
    users = db.session.query(User).order_by(User.username).all()
    if not users:
        click.echo("No users found")
        return
    for user in users:
        status = "active" if user.is_active else "inactive"
        click.echo(f"{user.id:>4}  {user.username:<20} {user.role:<6} {status}  {user.name}")


@users_group.command('create')
@click.option('--username', prompt=True)
@click.option('--name', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(ALL_ROLES), default=Role.STAFF, show_default=True)
@with_appcontext
def create_user_command(username, name, password, role):
    """Create a user."""
    try:
        user = create_user(username=username, password=password, name=name, role=role)
    except (ConflictError, ValidationError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)
    click.echo(f"PASS Created user {user.username} (ID: {user.id}, role: {user.role})")


@click.group('maintenance')
def maintenance_group():
    """Housekeeping commands."""


@maintenance_group.command('cleanup-sessions')
@click.option('--retention-days', default=30, show_default=True, type=int)
@with_appcontext
def cleanup_sessions(retention_days):
    """Delete expired/revoked sessions older than the retention window."""
    deleted = session_service.cleanup_expired_sessions(retention_days=retention_days)
    click.echo(f"PASS Deleted {deleted} session(s)")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
