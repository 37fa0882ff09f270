import click

from motiva_backend.cli.utils import get_store, handle_store_exceptions
from motiva_backend.services import SessionService

@click.command()
@click.argument("member_id")
@click.argument("email")
@click.option("--ttl", "ttl_seconds", type=int, default=None, help="Lifetime in seconds")
@handle_store_exceptions
def create_session(member_id, email, ttl_seconds):
  """Issue a bearer token for MEMBER_ID and print it."""
  click.echo(SessionService(get_store()).create_session(member_id, email, ttl_seconds))

@click.command()
@click.argument("token")
@handle_store_exceptions
def revoke_session(token):
  if not SessionService(get_store()).revoke_session(token):
    click.echo(click.style("Unknown session",fg='yellow'))

@click.group()
def sessions():
    pass

sessions.add_command(create_session,"create")
sessions.add_command(revoke_session,"revoke")
