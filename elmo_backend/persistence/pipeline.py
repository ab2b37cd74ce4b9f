from pydantic import BaseModel, Field, computed_field
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.config import Settings
from elmo_backend.persistence.authors import save_authors
from elmo_backend.persistence.contributors import (
    save_contributor_institutions,
    save_contributor_persons,
)
from elmo_backend.persistence.coverage import (
    STC_FIELDS,
    save_spatial_temporal_coverage,
)
from elmo_backend.persistence.errors import SubmissionError
from elmo_backend.persistence.form import Form, text
from elmo_backend.persistence.funding_references import save_funding_references
from elmo_backend.persistence.ggm_properties import save_ggm_properties
from elmo_backend.persistence.resource import save_resource_information_and_rights

logger = get_logger(__name__)


class SubmissionResult(BaseModel):
    """Outcome of one submission; every form group reports separately."""

    resource_id: int | None = None
    groups: dict[str, bool] = Field(default_factory=dict)

    @computed_field
    @property
    def success(self) -> bool:
        return self.resource_id is not None and all(self.groups.values())


async def save_dataset(
    db: AsyncSession, form: Form, settings: Settings
) -> SubmissionResult:
    """Persist a full submission: the resource first, then each enabled group.

    Every group commits on its own, so a failing group leaves the resource
    and the groups saved before it in place.
    """
    resource_id = await save_resource_information_and_rights(db, form)
    if resource_id is False:
        return SubmissionResult()

    log = logger.bind(resource_id=resource_id)
    result = SubmissionResult(resource_id=resource_id)
    groups = result.groups

    groups["authors"] = await save_authors(db, form, resource_id)
    if settings.SHOW_CONTRIBUTOR_PERSONS:
        groups["contributor_persons"] = await save_contributor_persons(
            db, form, resource_id
        )
    if settings.SHOW_CONTRIBUTOR_INSTITUTIONS:
        groups["contributor_institutions"] = await save_contributor_institutions(
            db, form, resource_id
        )
    # a partially submitted coverage group still reaches the saver and fails there
    if settings.SHOW_SPATIAL_TEMPORAL_COVERAGE and any(
        field in form for field in STC_FIELDS
    ):
        groups["spatial_temporal_coverage"] = await save_spatial_temporal_coverage(
            db, form, resource_id
        )
    if settings.SHOW_FUNDING_REFERENCE:
        groups["funding_references"] = await save_funding_references(
            db, form, resource_id
        )
    if settings.SHOW_GGMS_PROPERTIES and text(form.get("model_name")):
        try:
            groups["ggm_properties"] = await save_ggm_properties(db, form, resource_id)
        except SubmissionError as e:
            log.warning("Rejected GGM properties", error=str(e))
            groups["ggm_properties"] = False

    log.info("Saved dataset", groups=groups, success=result.success)
    return result
