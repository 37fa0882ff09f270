import click

from motiva_backend.cli.utils import get_store, handle_store_exceptions
from motiva_backend.permissions.principal import Role
from motiva_backend.services import RoleAssignmentService

@click.command()
@click.argument("member_id")
@click.argument("role", type=click.Choice([r.value for r in Role]))
@handle_store_exceptions
def assign_role(member_id, role):
  """Make ROLE the only active role of MEMBER_ID."""
  assignment = RoleAssignmentService(get_store()).assign_role(member_id, role)
  click.echo(f"{member_id} is now {click.style(assignment['role'],fg='green')}")

@click.command()
@click.argument("member_id")
@handle_store_exceptions
def revoke_role(member_id):
  """Deactivate every active role of MEMBER_ID."""
  count = RoleAssignmentService(get_store()).revoke_role(member_id)
  click.echo(f"Revoked {count} role assignment(s) of {member_id}")

@click.command()
@click.argument("member_id")
@handle_store_exceptions
def show_role(member_id):
  role = RoleAssignmentService(get_store()).get_role(member_id)
  click.echo(role.value if role else click.style("no active role",fg='yellow'))

@click.group()
def roles():
    pass

roles.add_command(assign_role,"assign")
roles.add_command(revoke_role,"revoke")
roles.add_command(show_role,"show")
