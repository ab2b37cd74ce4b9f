from datetime import date
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import Description, Resource, Title
from elmo_backend.models._associations import RESOURCE_CHILD_LINKS
from elmo_backend.persistence.form import (
    Form,
    text,
    text_cell,
    validate_required_fields,
)

logger = get_logger(__name__)

REQUIRED_FIELDS = ["year", "dateCreated", "resourcetype", "language"]
REQUIRED_ARRAY_FIELDS = ["title", "titleType"]


class ResourceInformation(BaseModel):
    """Typed view of the resource information and rights form group."""

    doi: str | None = None
    year: int
    date_created: date = Field(validation_alias="dateCreated")
    date_embargo_until: date | None = Field(None, validation_alias="dateEmbargo")
    resource_type_id: int = Field(validation_alias="resourcetype")
    version: float | None = None
    language_id: int = Field(validation_alias="language")
    rights_id: int = Field(validation_alias=AliasChoices("Rights", "rights"))

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_none(cls, val, info: ValidationInfo):
        """Form fields arrive as untrimmed strings; an empty one counts as omitted."""
        if isinstance(val, str):
            val = val.strip()
            if not val and not cls.model_fields[info.field_name].is_required():
                return None
        return val


def unique_titles(titles: list, title_types: list) -> list[tuple[str, int]]:
    """Pair titles with their types, dropping repeats of the same pair.

    Blank titles are ignored. Raises ValueError for a title without a valid
    type.
    """
    pairs: dict[tuple[str, int], None] = {}
    for i, title in enumerate(titles):
        title = text(title)
        if not title:
            continue
        pairs.setdefault((title, int(text_cell(title_types, i))), None)
    return list(pairs)


async def purge_resource_children(db: AsyncSession, resource_id: int) -> None:
    await db.execute(delete(Description).where(Description.resource_id == resource_id))
    await db.execute(delete(Title).where(Title.resource_id == resource_id))
    for link in RESOURCE_CHILD_LINKS:
        await db.execute(delete(link).where(link.c.resource_id == resource_id))


async def save_resource_information_and_rights(
    db: AsyncSession, form: Form
) -> int | Literal[False]:
    """Create or update the Resource row and its titles in one transaction.

    A submission whose DOI matches an existing resource updates that resource
    in place after removing everything previously attached to it. Returns the
    resource id, or False when the submission is incomplete or malformed.
    Database errors roll the transaction back and are re-raised.
    """
    rights_field = "Rights" if "Rights" in form else "rights"
    if not validate_required_fields(
        form, REQUIRED_FIELDS + [rights_field], REQUIRED_ARRAY_FIELDS
    ):
        logger.info("Resource information incomplete")
        return False

    try:
        info = ResourceInformation.model_validate(dict(form))
        titles = unique_titles(form["title"], form["titleType"])
    except ValidationError as e:
        logger.info("Invalid resource information", errors=e.errors())
        return False
    except ValueError:
        logger.info("Invalid title type")
        return False
    if not titles:
        logger.info("Resource information without a title")
        return False

    log = logger.bind(doi=info.doi)
    try:
        resource = await Resource.get(db, doi=info.doi) if info.doi else None
        if resource is not None:
            await purge_resource_children(db, resource.id)
            for field, value in info.model_dump(exclude={"doi"}).items():
                setattr(resource, field, value)
            log.info("Updating existing resource", resource_id=resource.id)
        else:
            resource = Resource(**info.model_dump())
            db.add(resource)
        await db.flush()
        resource_id = resource.id

        db.add_all(
            [
                Title(text=title, title_type_id=title_type_id, resource_id=resource_id)
                for title, title_type_id in titles
            ]
        )
        await db.commit()
    except Exception:
        await db.rollback()
        log.exception("Failed to save resource information")
        raise

    log.info("Saved resource information", resource_id=resource_id, titles=len(titles))
    return resource_id
