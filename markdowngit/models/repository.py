"""Value objects threaded through a single render call."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_HISTORY_LIMIT = 5


class UrlDescriptor(BaseModel):
    """A provider URL decomposed into the parts the APIs need."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="Host name without scheme")
    owner: str = Field(..., description="Owner/namespace, provider-encoded")
    repository: str | None = Field(default=None, description="Repository name, if separate from owner")
    branch: str = Field(..., description="Branch or other ref")
    file_path: str = Field(..., description="Path of the file inside the repository")

    @field_validator("file_path")
    @classmethod
    def _strip_leading_slash(cls, value: str) -> str:
        return value.lstrip("/")


class Credentials(BaseModel):
    """Effective credentials for one render call."""

    model_config = ConfigDict(frozen=True)

    user: str = ""
    token: str = ""
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=0)

    @property
    def is_anonymous(self) -> bool:
        return not self.user and not self.token


class CommitRecord(BaseModel):
    """One entry of a file's commit history."""

    model_config = ConfigDict(frozen=True)

    author_name: str
    timestamp_raw: str
    message: str
