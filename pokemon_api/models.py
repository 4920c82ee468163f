"""ORM models (SQLAlchemy 2.0)."""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, Text
from .db import Base


class Pokemon(Base):
    """A stored Pokemon record.

    Columns:
        id: Auto-incrementing primary key, assigned on insert.
        name: Display name.
        height: Non-negative integer.
        weight: Non-negative integer.
        image: Image URL (presence only is enforced).
    """

    __tablename__ = "pokemon"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[int] = mapped_column(Integer, nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)
