import click

from .roles import roles
from .trainers import trainers
from .sessions import sessions
from .serve import serve

@click.group()
def cli():
    pass

cli.add_command(roles,"roles")
cli.add_command(trainers,"trainers")
cli.add_command(sessions,"sessions")
cli.add_command(serve,"serve")

if __name__ == '__main__':
    cli()
