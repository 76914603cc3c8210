# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/techasset/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to the package (PowerShell: $env:FLASK_APP="techasset").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables, password categories and default users.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with roles and module permissions.
# - python -m flask users create --username jdoe --name "Jane Doe" --role editor
#   Create a user (prompts if options are omitted).

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import User
from .roles import ALL_ROLES, GLOBAL_ADMIN, MODULE_ADMIN, STANDARD_USER
from .schemas import UserPayload
from .services import password_service, user_service
from .validation import ValidationError


DEFAULT_USERS = (
    ("globaladmin", "Global Administrator", GLOBAL_ADMIN, []),
    ("moduleadmin", "Module Administrator", MODULE_ADMIN, ["chapmancg-log", "internal-log", "software-licenses"]),
    ("standarduser", "Standard User", STANDARD_USER, []),
)


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize the database and default accounts.

    Creates:
    - All tables (no-op for tables that exist)
    - Default password categories
    - Users: globaladmin, moduleadmin, standarduser
    - All passwords default to: "password"

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing TechAsset system...")

    db.create_all()
    click.echo("PASS Tables ready")

    created = password_service.seed_default_categories()
    click.echo(f"PASS Password categories seeded ({created} new)")

    click.echo("\nUSERS Creating default users...")
    for username, name, role, permissions in DEFAULT_USERS:
        if db.session.query(User).filter_by(username=username).first():
            click.echo(f"SKIP {username} already exists")
            continue
        payload = UserPayload(
            username=username,
            name=name,
            role=role,
            module_permissions=list(permissions),
            password=user_service.DEFAULT_PASSWORD,
        )
        user_service.create_user(payload, actor_id=None)
        click.echo(f"PASS Created {username} ({role})")

    click.echo("\nPASS Initialization complete. Default password: \"password\"")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.username).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'Username':<20} {'Name':<30} {'Role':<15} {'Modules'}")
    click.echo("="*90)

    for user in users:
        modules = ", ".join(user.permissions) or "-"
        click.echo(f"{user.username:<20} {user.name:<30} {user.role:<15} {modules}")

    click.echo("="*90 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--name', prompt=True, help='Display name')
@click.option('--role', type=click.Choice(list(ALL_ROLES)), prompt=True, help='Role')
@click.option('--module', 'modules', multiple=True, help='Module permission (repeatable)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@with_appcontext
def create_user_cli(username, name, role, modules, password):
    """Create a new user."""
    payload = UserPayload(
        username=username.strip() or None,
        name=name.strip() or None,
        role=role,
        module_permissions=list(modules),
        password=password or None,
    )
    try:
        payload.validate()
        user_id = user_service.create_user(payload, actor_id=None)
    except ValidationError as e:
        click.echo(f"FAIL {e}")
        return

    click.echo(f"PASS Created user {username} ({role}) id={user_id}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
