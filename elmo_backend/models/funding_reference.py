from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class FundingReference(Base):
    """Shared across resources; the whole 6-tuple is the natural key."""

    __tablename__ = "Funding_Reference"
    __table_args__ = (
        UniqueConstraint(
            "funder",
            "funder_id",
            "funder_id_type",
            "grant_number",
            "grant_name",
            "award_uri",
            postgresql_nulls_not_distinct=True,
        ),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    funder: Mapped[str] = mapped_column(String(265))
    funder_id: Mapped[str | None] = mapped_column(String(11))
    funder_id_type: Mapped[str | None] = mapped_column(String(25))
    grant_number: Mapped[str | None] = mapped_column(String(45))
    grant_name: Mapped[str | None] = mapped_column(String(75))
    award_uri: Mapped[str | None] = mapped_column(String(255))
