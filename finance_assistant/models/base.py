"""Base model class with SQLAlchemy type hints."""

from __future__ import annotations

from datetime import datetime
import re
from typing import TYPE_CHECKING, cast

from flask_sqlalchemy.model import DefaultMeta
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..extensions import db as _db

if TYPE_CHECKING:
    Model = _db.Model
else:
    Model = cast(DefaultMeta, _db.Model)


class BaseModel(Model):  # type: ignore
    """Base model class with common fields and methods for all models."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        _db.DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )
    updated_at: Mapped[datetime] = mapped_column(
        _db.DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="Timestamp when the record was last updated",
    )

    @_db.declared_attr
    def __tablename__(cls) -> str:
        """Derive a snake_case table name from the CamelCase class name."""
        name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", cls.__name__)
        return re.sub("([a-z0-9])([A-Z])", r"\1_\2", name).lower()

    def save(self, commit: bool = True) -> None:
        """Save the current model instance to the database.

        Args:
            commit: If True, commit the transaction. Set to False to add several
                   objects in a single transaction.
        """
        _db.session.add(self)
        if commit:
            try:
                _db.session.commit()
            except Exception:
                _db.session.rollback()
                raise
