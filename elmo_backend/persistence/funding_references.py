import re

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import FundingReference, Resource
from elmo_backend.models._associations import resource_has_funding_reference
from elmo_backend.persistence.form import (
    Form,
    arrays_present,
    get_array,
    none_if_blank,
    text_cell,
)
from elmo_backend.persistence.validation import (
    validate_funding_reference_dependencies,
)

logger = get_logger(__name__)

FUNDING_ARRAYS = ("funder", "funderId", "grantNummer", "grantName", "awardURI")
CROSSREF_FUNDER_ID = "Crossref Funder ID"


def normalize_funder_id(funder_id: str | None) -> tuple[str | None, str | None]:
    """Reduce a funder id or funder DOI to its last 10 digits.

    >>> normalize_funder_id("https://doi.org/10.13039/100000001")
    ('9100000001', 'Crossref Funder ID')
    """
    digits = re.sub(r"[^0-9]", "", funder_id or "")[-10:]
    if not digits:
        return None, None
    return digits, CROSSREF_FUNDER_ID


async def link_resource_to_funding_reference(
    db: AsyncSession, resource_id: int, funding_reference_id: int
) -> bool:
    """Link both records, failing closed if either no longer exists."""
    if await db.get(Resource, resource_id) is None:
        return False
    if await db.get(FundingReference, funding_reference_id) is None:
        return False

    await db.execute(
        insert(resource_has_funding_reference)
        .values(resource_id=resource_id, funding_reference_id=funding_reference_id)
        .on_conflict_do_nothing()
    )
    return True


async def save_funding_references(
    db: AsyncSession, form: Form, resource_id: int
) -> bool:
    log = logger.bind(resource_id=resource_id)
    if not resource_id:
        log.warning("Invalid resource id for funding references")
        return False
    if not arrays_present(form, FUNDING_ARRAYS):
        return True

    funders = get_array(form, "funder")
    funder_ids = get_array(form, "funderId")
    grant_numbers = get_array(form, "grantNummer")
    grant_names = get_array(form, "grantName")
    award_uris = get_array(form, "awardURI")

    success = True
    for i in range(len(funders)):
        entry = {
            "funder": text_cell(funders, i),
            "funderId": text_cell(funder_ids, i),
            "grantNumber": text_cell(grant_numbers, i),
            "grantName": text_cell(grant_names, i),
            "awardUri": text_cell(award_uris, i),
        }
        if not validate_funding_reference_dependencies(entry):
            log.info("Funding reference failed dependency check", row=i)
            success = False
            continue
        if not (
            entry["funder"]
            or entry["funderId"]
            or entry["grantNumber"]
            or entry["grantName"]
        ):
            continue

        funder_id, funder_id_type = normalize_funder_id(entry["funderId"])
        try:
            async with db.begin_nested():
                funding_reference, _ = await FundingReference.get_or_create(
                    db,
                    funder=entry["funder"],
                    funder_id=funder_id,
                    funder_id_type=funder_id_type,
                    grant_number=none_if_blank(entry["grantNumber"]),
                    grant_name=none_if_blank(entry["grantName"]),
                    award_uri=none_if_blank(entry["awardUri"]),
                )
                linked = await link_resource_to_funding_reference(
                    db, resource_id, funding_reference.id
                )
        except SQLAlchemyError:
            log.exception("Failed to save funding reference", row=i)
            success = False
            continue

        if not linked:
            log.warning("Failed to link funding reference", row=i)
            success = False

    await db.commit()
    return success
