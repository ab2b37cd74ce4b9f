"""Accessors for array-of-parallel-fields form submissions.

A submission maps field names either to a scalar or, for repeated form
groups, to a list whose i-th element belongs to the i-th logical row.
"""

from typing import Any, Iterable, Mapping, Sequence

Form = Mapping[str, Any]


def text(value: Any) -> str:
    """Trimmed string form of a submitted value; missing values become ''."""
    if value is None:
        return ""
    return str(value).strip()


def none_if_blank(value: Any) -> str | None:
    return text(value) or None


def get_array(form: Form, name: str) -> list | None:
    value = form.get(name)
    return value if isinstance(value, list) else None


def arrays_present(form: Form, names: Iterable[str]) -> bool:
    return all(isinstance(form.get(name), list) for name in names)


def cell(values: Sequence | None, index: int) -> Any:
    """The raw value of one row in a parallel array, None when out of range."""
    if values is None or index >= len(values):
        return None
    return values[index]


def text_cell(values: Sequence | None, index: int) -> str:
    return text(cell(values, index))


def validate_required_fields(
    form: Form,
    required_fields: Iterable[str] = (),
    required_array_fields: Iterable[str] = (),
) -> bool:
    """Check that scalars are present and non-empty and arrays are non-empty lists."""
    for field in required_fields:
        if not text(form.get(field)):
            return False

    for field in required_array_fields:
        value = form.get(field)
        if not isinstance(value, list) or not value:
            return False

    return True
