from pydantic import BaseModel
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import Author, AuthorInstitution, AuthorPerson
from elmo_backend.models._associations import (
    author_has_affiliation,
    resource_has_author,
)
from elmo_backend.persistence.affiliations import (
    parse_affiliation_data,
    parse_ror_ids,
    save_affiliations,
)
from elmo_backend.persistence.form import Form, get_array, none_if_blank, text_cell

logger = get_logger(__name__)


class PersonAuthorRow(BaseModel):
    familyname: str
    givenname: str
    orcid: str | None = None
    affiliation: str = ""
    ror_ids: str = ""


class InstitutionAuthorRow(BaseModel):
    institutionname: str
    affiliation: str = ""
    ror_ids: str = ""


AuthorRow = PersonAuthorRow | InstitutionAuthorRow


def person_rows(form: Form) -> list[PersonAuthorRow]:
    """Person authors with both names given; anything less is dropped."""
    familynames = get_array(form, "familynames") or []
    givennames = get_array(form, "givennames")
    orcids = get_array(form, "orcids")
    affiliations = get_array(form, "personAffiliation")
    ror_ids = get_array(form, "authorPersonRorIds")

    rows = []
    for i in range(len(familynames)):
        familyname = text_cell(familynames, i)
        givenname = text_cell(givennames, i)
        if not (familyname and givenname):
            continue
        rows.append(
            PersonAuthorRow(
                familyname=familyname,
                givenname=givenname,
                orcid=none_if_blank(text_cell(orcids, i)),
                affiliation=text_cell(affiliations, i),
                ror_ids=text_cell(ror_ids, i),
            )
        )
    return rows


def institution_rows(form: Form) -> list[InstitutionAuthorRow]:
    names = get_array(form, "authorinstitutionName") or []
    affiliations = get_array(form, "institutionAffiliation")
    ror_ids = get_array(form, "authorInstitutionRorIds")

    return [
        InstitutionAuthorRow(
            institutionname=text_cell(names, i),
            affiliation=text_cell(affiliations, i),
            ror_ids=text_cell(ror_ids, i),
        )
        for i in range(len(names))
        if text_cell(names, i)
    ]


def has_orphan_ror_ids(row: AuthorRow) -> bool:
    """ROR ids must always come with the affiliation names they identify."""
    return any(parse_ror_ids(row.ror_ids)) and not parse_affiliation_data(
        row.affiliation
    )


async def resolve_author(db: AsyncSession, row: AuthorRow) -> int:
    """Find or create the person or institution and its Author link row."""
    if isinstance(row, PersonAuthorRow):
        person, _ = await AuthorPerson.get_or_create(
            db, familyname=row.familyname, givenname=row.givenname, orcid=row.orcid
        )
        author, _ = await Author.get_or_create(
            db, author_person_id=person.id, author_institution_id=None
        )
    else:
        institution, _ = await AuthorInstitution.get_or_create(
            db, institutionname=row.institutionname
        )
        author, _ = await Author.get_or_create(
            db, author_person_id=None, author_institution_id=institution.id
        )
    return author.id


async def save_authors(db: AsyncSession, form: Form, resource_id: int) -> bool:
    log = logger.bind(resource_id=resource_id)

    rows: list[AuthorRow] = [*person_rows(form), *institution_rows(form)]
    if not rows:
        log.info("No author with a complete name submitted")
        return False

    success = True
    for row in rows:
        if has_orphan_ror_ids(row):
            log.info("Skipped author with ROR id but no affiliation", row=row)
            continue

        try:
            async with db.begin_nested():
                author_id = await resolve_author(db, row)
                await db.execute(
                    insert(resource_has_author)
                    .values(resource_id=resource_id, author_id=author_id)
                    .on_conflict_do_nothing()
                )
        except SQLAlchemyError:
            log.exception("Failed to save author", row=row)
            success = False
            continue

        if row.affiliation and not await save_affiliations(
            db,
            author_id,
            row.affiliation,
            row.ror_ids,
            author_has_affiliation,
            "author_id",
        ):
            success = False

    await db.commit()
    log.info("Saved authors", rows=len(rows), success=success)
    return success
