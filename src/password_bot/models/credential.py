"""SQLAlchemy Credential model."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


class Credential(Base):
    """A stored (service, login, password) triple owned by one chat user.

    At most one row exists per ``(user_id, service)`` pair; saving an
    existing pair overwrites login and password.
    """

    __tablename__ = "credentials"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    service: Mapped[str] = mapped_column(Text, primary_key=True)
    login: Mapped[str] = mapped_column(Text, nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        # never render the password
        return f"<Credential user_id={self.user_id} service={self.service!r}>"
