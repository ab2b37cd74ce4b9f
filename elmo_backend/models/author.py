from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class AuthorPerson(Base):
    __tablename__ = "Author_person"
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


class AuthorInstitution(Base):
    __tablename__ = "Author_institution"
    id: Mapped[int] = mapped_column(primary_key=True)
    institutionname: Mapped[str] = mapped_column(unique=True)


class Author(Base):
    """Link row pointing at exactly one of a person or an institution."""

    __tablename__ = "Author"
    __table_args__ = (
        UniqueConstraint(
            "author_person_id",
            "author_institution_id",
            postgresql_nulls_not_distinct=True,
        ),
        CheckConstraint(
            "(author_person_id IS NULL) <> (author_institution_id IS NULL)",
            name="author_person_xor_institution",
        ),
    )
    id: Mapped[int] = mapped_column(primary_key=True)
    author_person_id: Mapped[int | None] = mapped_column(
        ForeignKey("Author_person.id")
    )
    author_institution_id: Mapped[int | None] = mapped_column(
        ForeignKey("Author_institution.id")
    )
