"""SQLAlchemy ORM model for the users table.

One row per identity seen by the service, keyed by the identity
provider's subject id.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class UserModel(Base):
    """ORM model for users table.

    ``external_user_id`` is supplied by the identity provider, so the
    primary key has no database-side default.
    """

    __tablename__ = "users"

    external_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, autoincrement=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<UserModel(external_user_id={self.external_user_id}, "
            f"created_at={self.created_at})>"
        )
