from datetime import date, time

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from elmo_backend.models.base import Base


class SpatialTemporalCoverage(Base):
    __tablename__ = "Spatial_Temporal_Coverage"
    id: Mapped[int] = mapped_column(primary_key=True)
    latitude_min: Mapped[float | None]
    latitude_max: Mapped[float | None]
    longitude_min: Mapped[float | None]
    longitude_max: Mapped[float | None]
    description: Mapped[str | None]
    date_start: Mapped[date | None]
    date_end: Mapped[date | None]
    time_start: Mapped[time | None]
    time_end: Mapped[time | None]
    timezone: Mapped[str | None] = mapped_column(String(10))
