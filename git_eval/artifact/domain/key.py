"""CacheKey — content-addressed identity of one evaluated repository version."""

from pydantic import BaseModel, Field

_PREFIX = "eval"


class CacheKey(BaseModel, frozen=True):
    """(owner, name, version) triple.

    ``version`` is the commit sha resolved during the current run; a key built
    from any other source may address a different artifact.
    """

    owner: str = Field(min_length=1)
    name: str = Field(min_length=1)
    version: str = Field(min_length=1)

    def as_string(self) -> str:
        return f"{_PREFIX}:{self.owner}:{self.name}:{self.version}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}@{self.version}"
