from .base import Base, metadata
from .document import Document

__all__ = [
    'Base',
    'metadata',
    'Document',
]
