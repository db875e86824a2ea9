"""Reference payload schemas and backend outcomes."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StandardizedEntity(BaseModel):
    """A release, tag or commit normalized to a common shape."""

    ref: str = Field("", description="Commit SHA, release tag or tag name")
    url: str = Field("", description="Commit URL or release URL")
    message: str = Field("", description="Commit message or release body")
    author: str = Field("", description="Author login")
    published_at: str = Field("", description="Commit date or release publish date")


class StandardizedOutput(BaseModel):
    """Latest vs current reference pair returned to callers."""

    latest: Optional[StandardizedEntity] = None
    current: Optional[StandardizedEntity] = None

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class ErrorResponse(BaseModel):
    """Error body produced by a reference backend."""

    error: str

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class OutcomeKind(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class BackendOutcome(BaseModel):
    """Result of a single backend lookup."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    status_code: int
    body: bytes = b""

    @classmethod
    def from_response(cls, status_code: int, body: bytes) -> "BackendOutcome":
        """Classify an HTTP-style response: 404 falls through, 2xx is found, anything else is an error."""
        if status_code == 404:
            kind = OutcomeKind.NOT_FOUND
        elif 200 <= status_code < 300:
            kind = OutcomeKind.FOUND
        else:
            kind = OutcomeKind.ERROR
        return cls(kind=kind, status_code=status_code, body=body)

    @classmethod
    def found(cls, payload: StandardizedOutput) -> "BackendOutcome":
        return cls.from_response(200, payload.to_bytes())

    @classmethod
    def failure(cls, status_code: int, message: str) -> "BackendOutcome":
        return cls.from_response(status_code, ErrorResponse(error=message).to_bytes())

    @property
    def is_conclusive(self) -> bool:
        return self.kind is not OutcomeKind.NOT_FOUND
