from datetime import date

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class Resource(Base):
    __tablename__ = "Resource"
    id: Mapped[int] = mapped_column(primary_key=True)
    # unique, but several draft resources may still lack a DOI
    doi: Mapped[str | None] = mapped_column(String(100), unique=True)
    version: Mapped[float | None] = mapped_column(Numeric(asdecimal=False))
    year: Mapped[int]
    date_created: Mapped[date]
    date_embargo_until: Mapped[date | None]

    rights_id: Mapped[int] = mapped_column(ForeignKey("Rights.id"))
    resource_type_id: Mapped[int] = mapped_column(ForeignKey("Resource_Type.id"))
    language_id: Mapped[int] = mapped_column(ForeignKey("Language.id"))

    # set by the GGM properties form group
    model_type_id: Mapped[int | None] = mapped_column(ForeignKey("Model_Type.id"))
    mathematical_representation_id: Mapped[int | None] = mapped_column(
        ForeignKey("Mathematical_Representation.id")
    )
    file_format_id: Mapped[int | None] = mapped_column(ForeignKey("File_Format.id"))


class Title(Base):
    __tablename__ = "Title"
    id: Mapped[int] = mapped_column(primary_key=True)
    text: Mapped[str] = mapped_column(String(256))
    title_type_id: Mapped[int] = mapped_column(ForeignKey("Title_Type.id"))
    resource_id: Mapped[int] = mapped_column(ForeignKey("Resource.id"), index=True)


class Description(Base):
    __tablename__ = "Description"
    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[str] = mapped_column(String(22))
    description: Mapped[str]
    resource_id: Mapped[int] = mapped_column(ForeignKey("Resource.id"), index=True)
