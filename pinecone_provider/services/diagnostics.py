"""User-facing diagnostics collected during a lifecycle call and returned to the host."""

from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Diagnostic(BaseModel):
    """One problem report. attribute is a dotted path such as 'metadata_config.indexed'."""

    severity: Severity
    summary: str
    detail: str = ""
    attribute: str | None = Field(default=None, description="Attribute the diagnostic refers to")


class Diagnostics:
    """
    Accumulator passed down a call chain. Callees append and return; the caller checks
    has_error() before going on and hands the whole list back at the boundary.
    """

    def __init__(self, items: Iterable[Diagnostic] = ()) -> None:
        self._items: list[Diagnostic] = list(items)

    def add_error(self, summary: str, detail: str = "", attribute: str | None = None) -> None:
        self._items.append(Diagnostic(severity=Severity.ERROR, summary=summary, detail=detail, attribute=attribute))

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    def to_list(self) -> list[Diagnostic]:
        return list(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
