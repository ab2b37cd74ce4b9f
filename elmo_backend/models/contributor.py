from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class ContributorPerson(Base):
    __tablename__ = "Contributor_Person"
    __table_args__ = (
        UniqueConstraint(
            "familyname",
            "givenname",
            "orcid",
            postgresql_nulls_not_distinct=True,
        ),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    familyname: Mapped[str]
    givenname: Mapped[str]
    orcid: Mapped[str | None] = mapped_column(String(19))


class ContributorInstitution(Base):
    __tablename__ = "Contributor_Institution"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)
