"""Child records saved by form groups outside the persistence core.

They are modelled so that resubmitting a resource can purge its links to them.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class ContactPerson(Base):
    __tablename__ = "Contact_Person"
    id: Mapped[int] = mapped_column(primary_key=True)
    familyname: Mapped[str]
    givenname: Mapped[str]
    orcid: Mapped[str | None] = mapped_column(String(19))
    email: Mapped[str] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(255))


class OriginatingLaboratory(Base):
    __tablename__ = "Originating_Laboratory"
    id: Mapped[int] = mapped_column(primary_key=True)
    laboratoryname: Mapped[str]
    lab_id: Mapped[str | None] = mapped_column(String(32), unique=True)


class RelatedWork(Base):
    __tablename__ = "Related_Work"
    id: Mapped[int] = mapped_column(primary_key=True)
    identifier: Mapped[str] = mapped_column(String(245))
    relation: Mapped[str] = mapped_column(String(45))
    identifier_type: Mapped[str] = mapped_column(String(45))


class ThesaurusKeyword(Base):
    __tablename__ = "Thesaurus_Keywords"
    id: Mapped[int] = mapped_column(primary_key=True)
    keyword: Mapped[str]
    scheme: Mapped[str | None]
    scheme_uri: Mapped[str | None] = mapped_column(String(256))
    value_uri: Mapped[str | None] = mapped_column(String(1000))
    language: Mapped[str] = mapped_column(String(20))


class FreeKeyword(Base):
    __tablename__ = "Free_Keywords"
    id: Mapped[int] = mapped_column(primary_key=True)
    free_keyword: Mapped[str] = mapped_column(String(100), unique=True)
