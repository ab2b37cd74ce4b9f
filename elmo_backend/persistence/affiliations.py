import json
from typing import Any

from sqlalchemy import Table
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import Affiliation

logger = get_logger(__name__)

ROR_URL_PREFIX = "https://ror.org/"


def parse_affiliation_data(affiliation_text: Any) -> list[str]:
    """Names from the tag input's JSON payload, e.g. ``[{"value": "GFZ"}]``."""
    if not affiliation_text:
        return []
    try:
        items = json.loads(affiliation_text)
    except (TypeError, json.JSONDecodeError):
        return []
    if not isinstance(items, list):
        return []

    names = []
    for item in items:
        name = item.get("value") if isinstance(item, dict) else item
        if isinstance(name, str) and name.strip():
            names.append(name.strip())
    return names


def parse_ror_ids(ror_text: Any) -> list[str | None]:
    """Split comma-separated ROR ids or URLs, keeping blank slots as None."""
    if not ror_text or not str(ror_text).strip():
        return []
    ror_ids = []
    for part in str(ror_text).split(","):
        ror_id = part.strip().replace(ROR_URL_PREFIX, "")
        ror_ids.append(ror_id or None)
    return ror_ids


async def save_affiliations(
    db: AsyncSession,
    owner_id: int,
    affiliation_text: Any,
    ror_text: Any,
    link_table: Table,
    owner_column: str,
) -> bool:
    """Link an owner to its affiliations, pairing names and ROR ids by position."""
    names = parse_affiliation_data(affiliation_text)
    ror_ids = parse_ror_ids(ror_text)

    try:
        async with db.begin_nested():
            for i, name in enumerate(names):
                ror_id = ror_ids[i] if i < len(ror_ids) else None
                affiliation, _ = await Affiliation.get_or_create(
                    db, name=name, ror_id=ror_id
                )
                await db.execute(
                    insert(link_table)
                    .values({owner_column: owner_id, "affiliation_id": affiliation.id})
                    .on_conflict_do_nothing()
                )
    except SQLAlchemyError:
        logger.exception(
            "Failed to save affiliations",
            owner_table=link_table.name,
            owner_id=owner_id,
        )
        return False
    return True
