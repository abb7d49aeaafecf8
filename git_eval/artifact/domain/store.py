"""ArtifactStore Protocol — the durable source of truth for evaluations."""

from typing import Protocol

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.artifact.domain.key import CacheKey


class ArtifactStore(Protocol):
    """Entries never expire. At most one artifact exists per CacheKey."""

    async def get_artifact(self, artifact_id: str) -> Evaluation | None: ...

    async def get_artifact_by_key(self, key: CacheKey) -> Evaluation | None: ...

    async def put_artifact(
        self, artifact: Evaluation, replace: bool = False
    ) -> Evaluation:
        """Persist *artifact* and return it with its assigned id.

        If an artifact already exists for the same key, the existing one is
        returned unchanged (first writer wins). With *replace* the existing
        body is overwritten instead and keeps its id.

        Raises:
            ArtifactStoreError: if the write could not be made durable.
        """
        ...

    async def list_artifacts(self, owner: str, name: str) -> list[Evaluation]: ...
