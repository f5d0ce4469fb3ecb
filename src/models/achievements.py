from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

CSV_HEADER_PREFIX = "id,name,description,prerequisites,"

# Room for the JSON envelope around the csv field
ENVELOPE_OVERHEAD = 1000


class RequestAction(str, Enum):
    """Enum for optional request actions"""
    VERIFY = "verify"


class EndpointConfig(BaseModel):
    password_hash: str
    file_path: str
    branch: str
    max_csv_size: int = 50000
    commit_message: str = "Update achievements data"

    @property
    def max_body_size(self) -> int:
        return self.max_csv_size + ENVELOPE_OVERHEAD


class SaveRequest(BaseModel):
    """Inbound request envelope.

    Fields are loosely typed on purpose: a wrong type must produce the same
    outcome as a missing field, which the service decides, not pydantic.
    """
    password: Any = None
    action: Any = None
    csv: Any = None


class VerifyResponse(BaseModel):
    success: bool = True
    verified: bool = True


class SaveResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str = Field(description="Human-readable error message")


class FileRevision(BaseModel):
    """Current committed state of a tracked file in the remote store"""
    path: str
    branch: str
    sha: str


class CommitRecord(BaseModel):
    """One write attempt against the contents API"""
    message: str
    content: str = Field(description="Base64 of the UTF-8 encoded file")
    branch: str
    sha: Optional[str] = Field(
        default=None, description="Revision the write is based on, if any"
    )

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)
