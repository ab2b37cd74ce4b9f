from typing import Literal, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import (
    FileFormat,
    GGMProperties,
    MathematicalRepresentation,
    ModelType,
    Resource,
)
from elmo_backend.models._associations import resource_has_ggm_properties
from elmo_backend.persistence.errors import InvalidGGMProperties, UnknownVocabularyTerm
from elmo_backend.persistence.form import Form

logger = get_logger(__name__)

GGM_COLUMNS = {
    "model_name",
    "celestial_body",
    "product_type",
    "degree",
    "errors",
    "error_handling_approach",
    "tide_system",
}


class GGMPropertiesForm(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str = Field(min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_-]+$")
    model_type: Literal["Static", "Temporal", "Topographic", "Simulated"]
    mathematical_representation: Literal[
        "Spherical harmonics", "Ellipsoidal harmonics"
    ]
    file_format: str = Field(min_length=1)
    celestial_body: (
        Literal["Earth", "Moon of the Earth", "Mars", "Ceres", "Venus", "Other"] | None
    ) = None
    product_type: Literal["gravity_field", "topography"] | None = None
    degree: int | None = Field(None, ge=0)
    errors: str | None = Field(None, max_length=100)
    error_handling_approach: str | None = Field(None, max_length=5000)
    tide_system: Literal["zero_tide", "tide_free", "mean_tide", "unknown"] | None = None

    @field_validator("*", mode="before")
    @classmethod
    def trim(cls, val, info: ValidationInfo):
        if isinstance(val, str):
            val = val.strip()
            if not val and not cls.model_fields[info.field_name].is_required():
                return None
        return val


async def _vocabulary_id(db: AsyncSession, vocabulary: Type, name: str) -> int:
    term_id = await db.scalar(select(vocabulary.id).where(vocabulary.name == name))
    if term_id is None:
        raise UnknownVocabularyTerm(vocabulary.__tablename__, name)
    return term_id


async def save_ggm_properties(db: AsyncSession, form: Form, resource_id: int) -> bool:
    """Create or update the GGM properties of a resource, all or nothing.

    The properties row is found through the resource's link, so saving again
    rewrites the same row. The model type, mathematical representation and
    file format are resolved by name and stored on the resource itself.

    Raises InvalidGGMProperties for malformed input, UnknownVocabularyTerm
    when a name has no vocabulary entry, and re-raises database errors after
    rolling back.
    """
    log = logger.bind(resource_id=resource_id)
    try:
        properties = GGMPropertiesForm.model_validate(dict(form))
    except ValidationError as e:
        raise InvalidGGMProperties(str(e)) from e

    values = properties.model_dump(include=GGM_COLUMNS)
    try:
        ggm_id = await db.scalar(
            select(resource_has_ggm_properties.c.ggm_properties_id).where(
                resource_has_ggm_properties.c.resource_id == resource_id
            )
        )
        if ggm_id is None:
            ggm = GGMProperties(**values)
            db.add(ggm)
            await db.flush()
            ggm_id = ggm.id
            await db.execute(
                insert(resource_has_ggm_properties).values(
                    resource_id=resource_id, ggm_properties_id=ggm_id
                )
            )
        else:
            await db.execute(
                update(GGMProperties).where(GGMProperties.id == ggm_id).values(**values)
            )

        await db.execute(
            update(Resource)
            .where(Resource.id == resource_id)
            .values(
                model_type_id=await _vocabulary_id(
                    db, ModelType, properties.model_type
                ),
                mathematical_representation_id=await _vocabulary_id(
                    db, MathematicalRepresentation, properties.mathematical_representation
                ),
                file_format_id=await _vocabulary_id(
                    db, FileFormat, properties.file_format
                ),
            )
        )
        await db.commit()
    except Exception:
        await db.rollback()
        log.exception("Failed to save GGM properties")
        raise

    log.info("Saved GGM properties", ggm_properties_id=ggm_id)
    return True
