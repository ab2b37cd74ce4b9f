import json
from typing import Annotated, Any

from pydantic import BeforeValidator, TypeAdapter
from sqlalchemy import Table, delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from elmo_backend.models import Role, RoleScope

logger = get_logger(__name__)


def normalize_roles(raw: Any) -> list[str]:
    """Flatten the shapes a role selection arrives in to a list of unique names.

    Accepts a JSON-encoded string, a list of names, or a list of
    ``{"value": name}`` objects (as sent by the tag input widget). Text that
    is not valid JSON yields no roles.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return []
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if isinstance(raw, (str, dict)):
        raw = [raw]
    if not isinstance(raw, list):
        return []

    names: list[str] = []
    for role in raw:
        name = role.get("value") if isinstance(role, dict) else role
        if not isinstance(name, str):
            continue
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return names


RoleList = Annotated[list[str], BeforeValidator(normalize_roles)]

_role_list = TypeAdapter(RoleList)

RoleVocabulary = dict[str, int]


async def load_role_vocabulary(db: AsyncSession, scope: RoleScope) -> RoleVocabulary:
    """Map role names to ids for roles applicable to ``scope``."""
    stmt = select(Role.name, Role.id).where(Role.scope.in_([scope, RoleScope.BOTH]))
    result = await db.execute(stmt)
    return {name: role_id for name, role_id in result.all()}


async def replace_roles(
    db: AsyncSession,
    owner_id: int,
    raw_roles: Any,
    vocabulary: RoleVocabulary,
    link_table: Table,
    owner_column: str,
) -> list[int]:
    """Replace every role link of an owner with the submitted role set.

    Names missing from ``vocabulary`` are logged and skipped. Returns the ids
    of the linked roles.
    """
    roles = _role_list.validate_python(raw_roles)

    await db.execute(delete(link_table).where(link_table.c[owner_column] == owner_id))

    role_ids = []
    for name in roles:
        role_id = vocabulary.get(name)
        if role_id is None:
            logger.warning("Skipped unknown role", role=name, owner_id=owner_id)
            continue
        role_ids.append(role_id)

    if role_ids:
        await db.execute(
            insert(link_table).values(
                [{owner_column: owner_id, "role_id": role_id} for role_id in role_ids]
            )
        )
    return role_ids
