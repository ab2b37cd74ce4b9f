from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class Affiliation(Base):
    __tablename__ = "Affiliation"
    __table_args__ = (
        UniqueConstraint("name", "ror_id", postgresql_nulls_not_distinct=True),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(265))
    ror_id: Mapped[str | None] = mapped_column(String(25))
