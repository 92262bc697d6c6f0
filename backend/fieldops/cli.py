# Overview: Flask CLI command groups for bootstrap and user inspection.

# Commands Legend (run from the backend directory):
# - flask --app fieldops system init
#   Create tables (if missing) and seed the admin from ADMIN_EMAIL/ADMIN_PASSWORD.
# - flask --app fieldops system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - flask --app fieldops users list [--pending]
#   List users with role and approval status.
# - flask --app fieldops users create-supervisor --name "Sam" --email sam@example.com --cnic 12345 --city Lahore
#   Create a supervisor (prompts for the password).

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services import auth_service
from .validation import FieldOpsError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Idempotent bootstrap: create missing tables and seed the admin account.

    SECURITY: change the seeded admin password in production.
    """
    click.echo("START Initializing field operations backend...")
    db.create_all()
    click.echo("PASS Tables ready")

    admin = auth_service.ensure_seed_admin()
    if admin:
        click.echo(f"PASS Created admin: {admin.email}")
    else:
        click.echo("WARN  Admin already exists, skipping...")


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

    click.echo("PASS Database reset complete. Run 'flask --app fieldops system init' to seed the admin.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@click.option('--pending', is_flag=True, help='Only employees awaiting approval')
@with_appcontext
def list_users(pending):
    """List all users with role and approval status."""
    users = auth_service.list_users("pending" if pending else None)

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 90)
    click.echo(f"{'ID':<5} {'Role':<12} {'Name':<25} {'Email':<35} {'Approved'}")
    click.echo("=" * 90)
    for user in users:
        approved = "Yes" if user.is_approved else "No"
        click.echo(f"{user.id:<5} {user.role:<12} {user.name:<25} {user.email:<35} {approved}")


@users_group.command('create-supervisor')
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--cnic', 'cnic_number', prompt='CNIC number')
@click.option('--city', prompt=True)
@click.password_option()
@with_appcontext
def create_supervisor(name, email, cnic_number, city, password):
    """Create an approved supervisor account."""
    try:
        user = auth_service.create_supervisor({
            "name": name,
            "email": email,
            "cnicNumber": cnic_number,
            "city": city,
            "password": password,
            "confirmPassword": password,
        })
    except FieldOpsError as e:
        raise click.ClickException(e.message)

    current_app.logger.info("Supervisor %s created from CLI", user.id)
    click.echo(f"PASS Created supervisor: {user.name} ({user.email}) ID {user.id}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
