from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class GGMProperties(Base):
    __tablename__ = "GGM_Properties"
    id: Mapped[int] = mapped_column(primary_key=True)
    model_name: Mapped[str] = mapped_column(String(100))
    celestial_body: Mapped[str | None] = mapped_column(String(100))
    product_type: Mapped[str | None] = mapped_column(String(100))
    degree: Mapped[int | None]
    errors: Mapped[str | None] = mapped_column(String(100))
    error_handling_approach: Mapped[str | None]
    tide_system: Mapped[str | None] = mapped_column(String(100))
