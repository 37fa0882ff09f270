from sqlalchemy import (
    BigInteger, Column, DateTime, Index, JSON, String, func
)

from .base import Base


class Document(Base):
    """A record of any collection, stored as a JSON body keyed by collection and id"""
    __tablename__ = 'document'
    __table_args__ = (
        Index('document_collection_idx', 'collection'),
    )

    collection = Column(String(255), primary_key=True, nullable=False)
    id = Column(String(255), primary_key=True, nullable=False)
    version = Column(BigInteger, nullable=False, default=1)
    created_at = Column(DateTime(True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(True), nullable=False, server_default=func.now(), onupdate=func.now())
    data = Column(JSON, nullable=False)
