from datetime import date, time
from typing import Any, Callable

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import SpatialTemporalCoverage
from elmo_backend.models._associations import resource_has_spatial_temporal_coverage
from elmo_backend.persistence.form import Form, arrays_present, get_array, text_cell
from elmo_backend.persistence.validation import (
    STC_BASE_FIELDS,
    is_blank,
    validate_stc_dependencies,
)

logger = get_logger(__name__)

# form field -> entry key
STC_FIELDS = {
    "tscLatitudeMin": "latitudeMin",
    "tscLatitudeMax": "latitudeMax",
    "tscLongitudeMin": "longitudeMin",
    "tscLongitudeMax": "longitudeMax",
    "tscDescription": "description",
    "tscDateStart": "dateStart",
    "tscDateEnd": "dateEnd",
    "tscTimeStart": "timeStart",
    "tscTimeEnd": "timeEnd",
    "tscTimezone": "timezone",
}
REQUIRED_STC_ARRAYS = [
    form_field for form_field, key in STC_FIELDS.items() if key in STC_BASE_FIELDS
]


def _optional(value: str, parse: Callable[[str], Any]) -> Any:
    return parse(value) if value else None


def coverage_from_entry(entry: dict[str, str]) -> SpatialTemporalCoverage:
    """Build a coverage row from a validated entry, empty optionals as None."""
    return SpatialTemporalCoverage(
        latitude_min=float(entry["latitudeMin"]),
        latitude_max=_optional(entry["latitudeMax"], float),
        longitude_min=float(entry["longitudeMin"]),
        longitude_max=_optional(entry["longitudeMax"], float),
        description=entry["description"],
        date_start=date.fromisoformat(entry["dateStart"]),
        date_end=date.fromisoformat(entry["dateEnd"]),
        time_start=_optional(entry["timeStart"], time.fromisoformat),
        time_end=_optional(entry["timeEnd"], time.fromisoformat),
        timezone=entry["timezone"],
    )


async def save_spatial_temporal_coverage(
    db: AsyncSession, form: Form, resource_id: int
) -> bool:
    """Insert every valid coverage row as a new record linked to the resource.

    Identical rows are not merged. Fails without writing anything when one of
    the required arrays is missing.
    """
    log = logger.bind(resource_id=resource_id)
    if not arrays_present(form, REQUIRED_STC_ARRAYS):
        log.info("Spatial temporal coverage arrays missing")
        return False

    arrays = {key: get_array(form, form_field) for form_field, key in STC_FIELDS.items()}
    row_count = len(arrays["latitudeMin"])

    success = True
    for i in range(row_count):
        entry = {key: text_cell(values, i) for key, values in arrays.items()}
        if is_blank(entry):
            continue
        if not validate_stc_dependencies(entry):
            log.info("Spatial temporal coverage failed dependency check", row=i)
            success = False
            continue

        try:
            async with db.begin_nested():
                coverage = coverage_from_entry(entry)
                db.add(coverage)
                await db.flush()
                await db.execute(
                    insert(resource_has_spatial_temporal_coverage).values(
                        resource_id=resource_id,
                        spatial_temporal_coverage_id=coverage.id,
                    )
                )
        except SQLAlchemyError:
            log.exception("Failed to save spatial temporal coverage", row=i)
            success = False

    await db.commit()
    return success
