import pytest
from sqlalchemy import func, select

from elmo_backend.models import FileFormat, GGMProperties, ModelType, Resource
from elmo_backend.models._associations import resource_has_ggm_properties
from elmo_backend.persistence.errors import (
    InvalidGGMProperties,
    SubmissionError,
    UnknownVocabularyTerm,
)
from elmo_backend.persistence.ggm_properties import (
    GGMPropertiesForm,
    save_ggm_properties,
)


@pytest.fixture
def ggm_form() -> dict:
    return {
        "model_name": "GGM05C",
        "model_type": "Static",
        "mathematical_representation": "Spherical harmonics",
        "file_format": "icgem1.0",
        "celestial_body": "Earth",
        "product_type": "gravity_field",
        "degree": "360",
        "errors": "formal",
        "error_handling_approach": "",
        "tide_system": "tide_free",
    }


def test_blank_optional_fields_become_none(ggm_form):
    ggm_form["celestial_body"] = " "
    ggm_form["degree"] = ""

    properties = GGMPropertiesForm.model_validate(ggm_form)

    assert properties.celestial_body is None
    assert properties.degree is None
    assert properties.error_handling_approach is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field, value",
    [
        ("model_name", ""),
        ("model_name", "GGM 05C"),
        ("model_type", "Dynamic"),
        ("celestial_body", "Pluto"),
        ("product_type", "geoid"),
        ("degree", "-1"),
        ("tide_system", "low_tide"),
        ("errors", "x" * 101),
    ],
)
async def test_invalid_properties_are_rejected(mocker, ggm_form, field, value):
    db = mocker.AsyncMock()
    ggm_form[field] = value

    with pytest.raises(InvalidGGMProperties):
        await save_ggm_properties(db, ggm_form, 1)
    db.execute.assert_not_called()


def test_ggm_errors_are_submission_errors():
    assert issubclass(InvalidGGMProperties, SubmissionError)
    error = UnknownVocabularyTerm("File_Format", "icgem3.0")
    assert isinstance(error, SubmissionError)
    assert error.vocabulary == "File_Format"
    assert error.term == "icgem3.0"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_saving_twice_updates_the_linked_row(db, resource_id, ggm_form):
    assert await save_ggm_properties(db, ggm_form, resource_id)

    ggm_form["degree"] = "720"
    ggm_form["file_format"] = "icgem2.0"
    assert await save_ggm_properties(db, ggm_form, resource_id)

    assert await db.scalar(select(func.count()).select_from(GGMProperties)) == 1
    links = await db.scalar(
        select(func.count()).select_from(resource_has_ggm_properties)
    )
    assert links == 1
    ggm = await db.scalar(
        select(GGMProperties).execution_options(populate_existing=True)
    )
    assert ggm.degree == 720

    resource = await db.get(Resource, resource_id, populate_existing=True)
    file_format = await db.get(FileFormat, resource.file_format_id)
    model_type = await db.get(ModelType, resource.model_type_id)
    assert file_format.name == "icgem2.0"
    assert model_type.name == "Static"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_file_format_saves_nothing(db, resource_id, ggm_form):
    ggm_form["file_format"] = "icgem3.0"

    with pytest.raises(UnknownVocabularyTerm):
        await save_ggm_properties(db, ggm_form, resource_id)

    assert await db.scalar(select(func.count()).select_from(GGMProperties)) == 0
    resource = await db.get(Resource, resource_id, populate_existing=True)
    assert resource.model_type_id is None
