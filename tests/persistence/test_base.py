import pytest
from sqlalchemy.exc import IntegrityError

from elmo_backend.models import AuthorInstitution


@pytest.fixture
def conflicting_db(mocker):
    """A session whose insert loses the race to a concurrent insert of the same key."""
    db = mocker.MagicMock()
    db.begin_nested.return_value.__aexit__.return_value = False
    db.flush = mocker.AsyncMock(
        side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
    )
    return db


@pytest.mark.asyncio
async def test_get_or_create_returns_the_concurrent_row(mocker, conflicting_db):
    winner = AuthorInstitution(id=3, institutionname="GFZ")
    get = mocker.patch.object(
        AuthorInstitution,
        "get",
        new_callable=mocker.AsyncMock,
        side_effect=[None, winner],
    )

    institution, created = await AuthorInstitution.get_or_create(
        conflicting_db, institutionname="GFZ"
    )

    assert institution is winner
    assert created is False
    assert get.await_count == 2
    conflicting_db.begin_nested.assert_called_once()


@pytest.mark.asyncio
async def test_get_or_create_reraises_when_no_row_exists(mocker, conflicting_db):
    mocker.patch.object(
        AuthorInstitution,
        "get",
        new_callable=mocker.AsyncMock,
        side_effect=[None, None],
    )

    with pytest.raises(IntegrityError):
        await AuthorInstitution.get_or_create(conflicting_db, institutionname="GFZ")


@pytest.mark.asyncio
async def test_get_or_create_returns_existing_row_without_insert(mocker):
    db = mocker.MagicMock()
    existing = AuthorInstitution(id=1, institutionname="GFZ")
    mocker.patch.object(
        AuthorInstitution,
        "get",
        new_callable=mocker.AsyncMock,
        return_value=existing,
    )

    assert await AuthorInstitution.get_or_create(db, institutionname="GFZ") == (
        existing,
        False,
    )
    db.begin_nested.assert_not_called()
    db.add.assert_not_called()
