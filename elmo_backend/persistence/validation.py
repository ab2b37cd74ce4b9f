"""Structural dependency checks for single rows of repeatable form groups.

Each check takes one logical row as a mapping of field name to submitted
value and returns whether the row is internally consistent. They never touch
the database.
"""

from datetime import date, time
from typing import Any, Callable, Mapping

from elmo_backend.persistence.form import text
from elmo_backend.persistence.roles import normalize_roles

Entry = Mapping[str, Any]

STC_BASE_FIELDS = (
    "latitudeMin",
    "longitudeMin",
    "description",
    "dateStart",
    "dateEnd",
    "timezone",
)

_STC_PARSERS: dict[str, Callable[[str], Any]] = {
    "latitudeMin": float,
    "latitudeMax": float,
    "longitudeMin": float,
    "longitudeMax": float,
    "dateStart": date.fromisoformat,
    "dateEnd": date.fromisoformat,
    "timeStart": time.fromisoformat,
    "timeEnd": time.fromisoformat,
}


def _roles_submitted(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip() not in ("", "[]")
    return bool(raw)


def is_blank(entry: Entry) -> bool:
    """True when no field of the row carries a value."""
    return not any(
        _roles_submitted(value) if key == "roles" else text(value)
        for key, value in entry.items()
    )


def validate_contributor_person_dependencies(entry: Entry) -> bool:
    if is_blank(entry):
        return True
    return bool(
        text(entry.get("lastname"))
        and text(entry.get("firstname"))
        and normalize_roles(entry.get("roles"))
    )


def validate_contributor_institution_dependencies(entry: Entry) -> bool:
    if is_blank(entry):
        return True
    return bool(text(entry.get("name")) and normalize_roles(entry.get("roles")))


def validate_funding_reference_dependencies(entry: Entry) -> bool:
    """Funder id, grant number, grant name and award URI each need a funder."""
    dependents = ("funderId", "grantNumber", "grantName", "awardUri")
    if any(text(entry.get(key)) for key in dependents):
        return bool(text(entry.get("funder")))
    return True


def validate_stc_dependencies(entry: Entry) -> bool:
    if not all(text(entry.get(key)) for key in STC_BASE_FIELDS):
        return False

    # max coordinates and times only come in pairs
    if bool(text(entry.get("latitudeMax"))) != bool(text(entry.get("longitudeMax"))):
        return False
    if bool(text(entry.get("timeStart"))) != bool(text(entry.get("timeEnd"))):
        return False

    for key, parse in _STC_PARSERS.items():
        value = text(entry.get(key))
        if not value:
            continue
        try:
            parse(value)
        except ValueError:
            return False
    return True
