import functools
import click
from fastapi import HTTPException

from motiva_backend.logging_config import configure_logging
from motiva_backend.store import DocumentStore, StoreError, create_document_store

def get_store() -> DocumentStore:
    configure_logging()
    return create_document_store()

def handle_store_exceptions(func):
  @functools.wraps(func)
  def wrapper(*args, **kwargs):
    try:
      return func(*args, **kwargs)
    except HTTPException as e:
      click.echo(f"[{click.style(e.status_code,fg='red')}] {e.detail}")
      raise SystemExit(1)
    except StoreError as e:
      click.echo(f"[{click.style('500',fg='red')}] {e}")
      raise SystemExit(1)

  return wrapper
