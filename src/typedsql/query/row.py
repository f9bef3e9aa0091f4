"""Schema-restricted result rows."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from typedsql.exceptions import UnknownFieldError


class ResultRow(Mapping[str, Any]):
    """Read-only row exposing exactly the fields derived from the query.

    Supports both ``row["name"]`` and ``row.name``. Reading a field the
    query does not select raises :class:`UnknownFieldError`, which is also a
    ``KeyError`` and an ``AttributeError`` so ``get()`` and ``hasattr()``
    behave as usual.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_values", dict(values))

    def __getitem__(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise UnknownFieldError(key, self._values) from None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __reduce__(self) -> tuple[type[ResultRow], tuple[dict[str, Any]]]:
        return (type(self), (self._values,))

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"

    def to_dict(self) -> dict[str, Any]:
        """Return the row as a plain dict."""
        return dict(self._values)


def project_row(
    columns: list[str], values: tuple[Any, ...] | list[Any], fields: list[str]
) -> tuple[ResultRow, list[str]]:
    """Map a driver row onto the schema's fields.

    Columns are matched to fields by exact name first, then
    case-insensitively (some drivers upper-case column labels). Driver
    columns without a matching field are dropped.

    Returns:
        The projected row and the fields no column matched (read as None)
    """
    by_name = dict(zip(columns, values, strict=True))
    by_folded = {column.lower(): value for column, value in by_name.items()}

    projected: dict[str, Any] = {}
    unmatched: list[str] = []
    for name in fields:
        if name in by_name:
            projected[name] = by_name[name]
        elif name.lower() in by_folded:
            projected[name] = by_folded[name.lower()]
        else:
            projected[name] = None
            unmatched.append(name)
    return ResultRow(projected), unmatched
