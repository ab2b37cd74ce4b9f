from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from elmo_backend.models import Resource, Title
from elmo_backend.models._associations import resource_has_author
from elmo_backend.persistence.authors import save_authors
from elmo_backend.persistence.resource import (
    ResourceInformation,
    save_resource_information_and_rights,
    unique_titles,
)


def test_unique_titles_keeps_first_occurrence():
    titles = ["A", "A", "B", "A"]
    title_types = ["1", "1", "2", "2"]
    assert unique_titles(titles, title_types) == [("A", 1), ("B", 2), ("A", 2)]


def test_unique_titles_ignores_blank_titles():
    assert unique_titles(["A", "  "], ["1"]) == [("A", 1)]


def test_unique_titles_rejects_missing_type():
    with pytest.raises(ValueError):
        unique_titles(["A", "B"], ["1"])


def test_resource_information_parses_form_values(resource_form):
    resource_form["dateEmbargo"] = "2025-01-01"
    info = ResourceInformation.model_validate(resource_form)

    assert info.doi is None
    assert info.year == 2024
    assert info.date_created == date(2024, 1, 15)
    assert info.date_embargo_until == date(2025, 1, 1)
    assert info.version == 1.0
    assert info.rights_id == 1


def test_resource_information_accepts_lowercase_rights(resource_form):
    resource_form["rights"] = resource_form.pop("Rights")
    assert ResourceInformation.model_validate(resource_form).rights_id == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["year", "dateCreated", "Rights", "title"])
async def test_incomplete_resource_information_is_rejected(
    resource_form, missing, mocker
):
    db = mocker.AsyncMock()
    del resource_form[missing]

    assert await save_resource_information_and_rights(db, resource_form) is False
    db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_malformed_resource_information_is_rejected(resource_form, mocker):
    db = mocker.AsyncMock()
    resource_form["dateCreated"] = "15.01.2024"

    assert await save_resource_information_and_rights(db, resource_form) is False
    db.execute.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_titles_are_saved_once(db, resource_form):
    resource_form["title"] = ["A", "A", "B"]
    resource_form["titleType"] = ["1", "1", "2"]

    resource_id = await save_resource_information_and_rights(db, resource_form)

    titles = (
        await db.execute(
            select(Title.text, Title.title_type_id)
            .where(Title.resource_id == resource_id)
            .order_by(Title.id)
        )
    ).all()
    assert titles == [("A", 1), ("B", 2)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resubmitting_a_doi_updates_in_place(db, resource_form):
    resource_form["doi"] = "10.5880/GFZ.1.2.2024.001"
    first_id = await save_resource_information_and_rights(db, resource_form)

    resource_form["year"] = "2025"
    resource_form["title"] = ["Revised title"]
    second_id = await save_resource_information_and_rights(db, resource_form)

    assert first_id == second_id
    assert await db.scalar(select(func.count()).select_from(Resource)) == 1
    resource = await db.get(Resource, first_id, populate_existing=True)
    assert resource.year == 2025
    titles = await db.scalars(select(Title.text).where(Title.resource_id == first_id))
    assert titles.all() == ["Revised title"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resubmitting_a_doi_replaces_children(db, resource_form):
    resource_form["doi"] = "10.5880/GFZ.1.2.2024.002"
    resource_id = await save_resource_information_and_rights(db, resource_form)
    author_form = {"familynames": ["Einstein"], "givennames": ["Albert"]}
    assert await save_authors(db, author_form, resource_id)

    assert await save_resource_information_and_rights(db, resource_form) == resource_id

    links = await db.scalar(
        select(func.count())
        .select_from(resource_has_author)
        .where(resource_has_author.c.resource_id == resource_id)
    )
    assert links == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_resources_without_doi_are_always_new(db, resource_form):
    first_id = await save_resource_information_and_rights(db, resource_form)
    second_id = await save_resource_information_and_rights(db, resource_form)

    assert first_id != second_id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_vocabulary_reference_rolls_back(db, resource_form):
    resource_form["language"] = "999"

    with pytest.raises(IntegrityError):
        await save_resource_information_and_rights(db, resource_form)

    assert await db.scalar(select(func.count()).select_from(Resource)) == 0
