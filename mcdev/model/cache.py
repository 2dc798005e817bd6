from typing import Optional, Dict

from pydantic import Field

from . import MetaBase, Versioned


class ArtifactURLIndex(Versioned):
    """Maps the string form of a coordinate to the base URL of the repository that served it."""

    artifacts: Dict[str, str] = Field(default_factory=dict)


class ChecksumRecord(MetaBase):
    sha256: str
    size: int
    modified: Optional[float] = None


class ChecksumIndex(Versioned):
    files: Dict[str, ChecksumRecord] = Field(default_factory=dict)
