"""Pydantic models for repositories and commits."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RepositoryRef(BaseModel):
    """Identity of a watched repository."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    name: str = Field(min_length=1)

    @field_validator("owner", "name")
    @classmethod
    def validate_segment(cls, v: str) -> str:
        if "/" in v or not v.strip():
            raise ValueError(f"invalid repository segment {v!r}")
        return v

    @property
    def uri(self) -> str:
        """The "owner/name" form, used as the sync ledger key."""
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, uri: str) -> "RepositoryRef":
        """Build a ref from an "owner/name" string."""
        parts = uri.split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(f"Invalid repo identifier '{uri}': expected 'owner/name'")
        return cls(owner=parts[0], name=parts[1])


class ChangedFile(BaseModel):
    """A file touched by a commit."""

    model_config = ConfigDict(frozen=True)

    filename: str
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    patch: str | None = Field(
        default=None,
        description="Unified diff text; absent for binary files or oversized diffs",
    )


class Commit(BaseModel):
    """A commit as reported by the commit source."""

    model_config = ConfigDict(frozen=True)

    sha: str = Field(min_length=1)
    message: str = ""
    author_login: str | None = None
    html_url: str = ""
    changed_files: list[ChangedFile] | None = Field(
        default=None,
        description="None when the source reported no file-level detail",
    )
