"""Tagged result of a single-record write against the storage backend."""

from dataclasses import dataclass
from enum import Enum


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"
    BACKEND_ERROR = "backend_error"


@dataclass(frozen=True)
class WriteOutcome:
    """
    What an update or delete did.

    APPLIED carries the number of records affected, BACKEND_ERROR carries the
    backend's error text. NOT_FOUND means the write matched nothing.
    """

    status: OutcomeStatus
    count: int = 0
    detail: str | None = None

    @classmethod
    def applied(cls, count: int = 1) -> "WriteOutcome":
        return cls(OutcomeStatus.APPLIED, count=count)

    @classmethod
    def not_found(cls) -> "WriteOutcome":
        return cls(OutcomeStatus.NOT_FOUND)

    @classmethod
    def backend_error(cls, detail: str) -> "WriteOutcome":
        return cls(OutcomeStatus.BACKEND_ERROR, detail=detail)
