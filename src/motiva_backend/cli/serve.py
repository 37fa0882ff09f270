import click
import uvicorn

from motiva_backend.settings import settings

@click.command()
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.option("--reload", is_flag=True, default=False)
def serve(host, port, reload):
  """Run the HTTP server."""
  uvicorn.run("motiva_backend.server:app", host=host, port=port, log_level=settings.LOG_LEVEL.lower(), reload=reload, workers=1)
