import pytest
from starlette.datastructures import FormData

from elmo_backend.api.routes.resources import form_to_submission


@pytest.fixture
def resource_form_data() -> dict:
    """Resource information as the browser posts it."""
    return {
        "doi": "",
        "year": "2024",
        "dateCreated": "2024-01-15",
        "resourcetype": "5",
        "version": "1.0",
        "language": "1",
        "Rights": "1",
        "title[]": ["Gravity field model of Mars", "Mars gravity"],
        "titleType[]": ["1", "2"],
        "familynames[]": ["Curie"],
        "givennames[]": ["Marie"],
        "orcids[]": [""],
    }


def test_form_to_submission_collects_arrays():
    form = FormData(
        [("year", "2024"), ("title[]", "A"), ("title[]", "B"), ("titleType[]", "1")]
    )

    assert form_to_submission(form) == {
        "year": "2024",
        "title": ["A", "B"],
        "titleType": ["1"],
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_resource(client, mock_db_session, resource_form_data):
    response = await client.post("/resources", data=resource_form_data)

    assert response.status_code == 200
    body = response.json()
    assert isinstance(body["resource_id"], int)
    assert body["groups"]["authors"] is True
    assert "spatial_temporal_coverage" not in body["groups"]
    assert body["success"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_resource_id_only(client, mock_db_session, resource_form_data):
    resource_form_data["get_resource_id"] = "1"

    response = await client.post("/resources", data=resource_form_data)

    assert response.status_code == 200
    assert set(response.json()) == {"resource_id"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_incomplete_resource(client, mock_db_session, resource_form_data):
    del resource_form_data["dateCreated"]

    response = await client.post("/resources", data=resource_form_data)

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Resource information is incomplete or invalid"
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_unknown_language(client, mock_db_session, resource_form_data):
    resource_form_data["language"] = "999"

    response = await client.post("/resources", data=resource_form_data)

    assert response.status_code == 409
