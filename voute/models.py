
from sqlalchemy import func
from .extensions import db


class Document(db.Model):
    """A whole JSON document, rewritten on every save.

    The reservation collection and the restaurant configuration each live
    in a single row keyed by name.
    """

    __tablename__ = "documents"
    key = db.Column(db.String(64), primary_key=True)
    body = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())
