import click

from motiva_backend.cli.utils import get_store, handle_store_exceptions
from motiva_backend.services import TrainerAssignmentService

@click.command()
@click.argument("trainer_id")
@click.argument("client_id")
@handle_store_exceptions
def assign_client(trainer_id, client_id):
  """Give TRAINER_ID access to CLIENT_ID."""
  result = TrainerAssignmentService(get_store()).assign_client(client_id, trainer_id)
  if not result.success:
    click.echo(f"[{click.style('failed',fg='red')}] {result.message}: {result.error}")
    raise SystemExit(1)
  click.echo(result.message)

@click.command()
@click.argument("trainer_id")
@click.argument("client_id")
@handle_store_exceptions
def unassign_client(trainer_id, client_id):
  """Revoke the access of TRAINER_ID to CLIENT_ID."""
  if TrainerAssignmentService(get_store()).unassign_client(client_id, trainer_id):
    click.echo(f"Unassigned {client_id} from {trainer_id}")
  else:
    click.echo(click.style(f"No active assignment of {client_id} to {trainer_id}",fg='yellow'))

@click.command()
@click.option("--trainer", "-t", "trainer_id", default=None, help="Defaults to DEFAULT_TRAINER_ID")
@handle_store_exceptions
def backfill(trainer_id):
  """Assign every client to a trainer."""
  summary = TrainerAssignmentService(get_store()).backfill(trainer_id)
  click.echo(", ".join(f"{key}: {value}" for key, value in summary.items()))

@click.group()
def trainers():
    pass

trainers.add_command(assign_client,"assign")
trainers.add_command(unassign_client,"unassign")
trainers.add_command(backfill,"backfill")
