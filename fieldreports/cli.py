import click
from flask.cli import with_appcontext

from fieldreports.extensions import db
from fieldreports.services.account_service import RegistrationError, register_account


@click.command('create-account')
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_account_command(username, password):
    """Create an installer account."""
    db.create_all()
    try:
        account = register_account(username, password)
    except RegistrationError as e:
        raise click.ClickException(str(e))
    click.echo(f"Account '{account.username}' created successfully.")


def register_commands(app):
    app.cli.add_command(create_account_command)
