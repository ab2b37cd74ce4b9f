from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import ContributorInstitution, ContributorPerson, RoleScope
from elmo_backend.models._associations import (
    contributor_institution_has_affiliation,
    contributor_institution_has_role,
    contributor_person_has_affiliation,
    contributor_person_has_role,
    resource_has_contributor_institution,
    resource_has_contributor_person,
)
from elmo_backend.persistence.affiliations import save_affiliations
from elmo_backend.persistence.form import (
    Form,
    arrays_present,
    cell,
    get_array,
    none_if_blank,
    text_cell,
)
from elmo_backend.persistence.roles import (
    RoleVocabulary,
    load_role_vocabulary,
    replace_roles,
)
from elmo_backend.persistence.validation import (
    is_blank,
    validate_contributor_institution_dependencies,
    validate_contributor_person_dependencies,
)

logger = get_logger(__name__)

PERSON_ARRAYS = (
    "cbPersonLastname",
    "cbPersonFirstname",
    "cbORCID",
    "cbAffiliation",
    "cbPersonRoles",
)
INSTITUTION_ARRAYS = (
    "cbOrganisationName",
    "cbOrganisationRoles",
    "OrganisationAffiliation",
)


async def save_contributor_persons(
    db: AsyncSession,
    form: Form,
    resource_id: int,
    vocabulary: RoleVocabulary | None = None,
) -> bool:
    """Save contributor persons with their affiliations and full role sets.

    A form without the contributor person group counts as success. Rows that
    fail the dependency check make the result False and are skipped; blank
    rows are skipped silently.
    """
    log = logger.bind(resource_id=resource_id)
    if not arrays_present(form, PERSON_ARRAYS):
        return True
    if vocabulary is None:
        vocabulary = await load_role_vocabulary(db, RoleScope.PERSON)

    lastnames = get_array(form, "cbPersonLastname")
    firstnames = get_array(form, "cbPersonFirstname")
    orcids = get_array(form, "cbORCID")
    affiliations = get_array(form, "cbAffiliation")
    ror_ids = get_array(form, "cbpRorIds")
    roles = get_array(form, "cbPersonRoles")

    success = True
    for i in range(len(lastnames)):
        entry = {
            "lastname": text_cell(lastnames, i),
            "firstname": text_cell(firstnames, i),
            "orcid": text_cell(orcids, i),
            "affiliation": text_cell(affiliations, i),
            "roles": cell(roles, i),
        }
        if not validate_contributor_person_dependencies(entry):
            log.info("Contributor person failed dependency check", row=i)
            success = False
            continue
        if is_blank(entry):
            continue

        try:
            async with db.begin_nested():
                person, _ = await ContributorPerson.get_or_create(
                    db,
                    familyname=entry["lastname"],
                    givenname=entry["firstname"],
                    orcid=none_if_blank(entry["orcid"]),
                )
                person_id = person.id
                await db.execute(
                    insert(resource_has_contributor_person)
                    .values(resource_id=resource_id, contributor_person_id=person_id)
                    .on_conflict_do_nothing()
                )
                await replace_roles(
                    db,
                    person_id,
                    entry["roles"],
                    vocabulary,
                    contributor_person_has_role,
                    "contributor_person_id",
                )
        except SQLAlchemyError:
            log.exception("Failed to save contributor person", row=i)
            success = False
            continue

        if entry["affiliation"] and not await save_affiliations(
            db,
            person_id,
            entry["affiliation"],
            text_cell(ror_ids, i),
            contributor_person_has_affiliation,
            "contributor_person_id",
        ):
            success = False

    await db.commit()
    return success


async def save_contributor_institutions(
    db: AsyncSession,
    form: Form,
    resource_id: int,
    vocabulary: RoleVocabulary | None = None,
) -> bool:
    log = logger.bind(resource_id=resource_id)
    if not arrays_present(form, INSTITUTION_ARRAYS):
        return True
    if vocabulary is None:
        vocabulary = await load_role_vocabulary(db, RoleScope.INSTITUTION)

    names = get_array(form, "cbOrganisationName")
    roles = get_array(form, "cbOrganisationRoles")
    affiliations = get_array(form, "OrganisationAffiliation")
    ror_ids = get_array(form, "hiddenOrganisationRorId")

    success = True
    for i in range(len(names)):
        entry = {
            "name": text_cell(names, i),
            "affiliation": text_cell(affiliations, i),
            "roles": cell(roles, i),
        }
        if not validate_contributor_institution_dependencies(entry):
            log.info("Contributor institution failed dependency check", row=i)
            success = False
            continue
        if is_blank(entry):
            continue

        try:
            async with db.begin_nested():
                institution, _ = await ContributorInstitution.get_or_create(
                    db, name=entry["name"]
                )
                institution_id = institution.id
                await db.execute(
                    insert(resource_has_contributor_institution)
                    .values(
                        resource_id=resource_id,
                        contributor_institution_id=institution_id,
                    )
                    .on_conflict_do_nothing()
                )
                await replace_roles(
                    db,
                    institution_id,
                    entry["roles"],
                    vocabulary,
                    contributor_institution_has_role,
                    "contributor_institution_id",
                )
        except SQLAlchemyError:
            log.exception("Failed to save contributor institution", row=i)
            success = False
            continue

        if entry["affiliation"] and not await save_affiliations(
            db,
            institution_id,
            entry["affiliation"],
            text_cell(ror_ids, i),
            contributor_institution_has_affiliation,
            "contributor_institution_id",
        ):
            success = False

    await db.commit()
    return success
