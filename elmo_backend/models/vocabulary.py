import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class RoleScope(str, enum.Enum):
    PERSON = "person"
    INSTITUTION = "institution"
    BOTH = "both"


class ResourceType(Base):
    __tablename__ = "Resource_Type"
    id: Mapped[int] = mapped_column(primary_key=True)
    resource_type_general: Mapped[str] = mapped_column(String(30), unique=True)
    description: Mapped[str | None]


class Rights(Base):
    __tablename__ = "Rights"
    id: Mapped[int] = mapped_column(primary_key=True)
    text: Mapped[str] = mapped_column(String(100))
    rights_identifier: Mapped[str | None] = mapped_column(String(20), unique=True)
    rights_uri: Mapped[str | None] = mapped_column(String(256))
    for_software: Mapped[bool] = mapped_column(default=False)


class Language(Base):
    __tablename__ = "Language"
    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(10), unique=True)
    name: Mapped[str] = mapped_column(String(20))


class TitleType(Base):
    __tablename__ = "Title_Type"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(25), unique=True)


class Role(Base):
    __tablename__ = "Role"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(45), unique=True)
    description: Mapped[str | None]
    scope: Mapped[RoleScope] = mapped_column(
        Enum(
            RoleScope,
            name="role_scope",
            values_callable=lambda scopes: [s.value for s in scopes],
        ),
        default=RoleScope.BOTH,
    )


class ModelType(Base):
    __tablename__ = "Model_Type"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None]


class MathematicalRepresentation(Base):
    __tablename__ = "Mathematical_Representation"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None]


class FileFormat(Base):
    __tablename__ = "File_Format"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str | None]
