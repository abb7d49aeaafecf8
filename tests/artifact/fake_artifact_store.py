"""FakeArtifactStore — in-memory ArtifactStore, first writer wins per key."""

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.artifact.domain.key import CacheKey
from git_eval.core.errors import ArtifactStoreError


class FakeArtifactStore:
    """Records the order of calls into ``calls`` so tests can check write ordering.

    Set ``fail_put`` or ``fail_get`` to simulate an unavailable database.
    """

    def __init__(self, calls: list[str] | None = None) -> None:
        self._by_id: dict[str, Evaluation] = {}
        self._by_key: dict[CacheKey, str] = {}
        self.calls = calls if calls is not None else []
        self.fail_put = False
        self.fail_get = False

    @property
    def artifacts(self) -> list[Evaluation]:
        return list(self._by_id.values())

    def seed(self, artifact: Evaluation) -> Evaluation:
        stored = artifact.model_copy(update={"id": f"artifact-{len(self._by_id) + 1}"})
        self._by_id[stored.id] = stored
        self._by_key[stored.key] = stored.id
        return stored

    async def get_artifact(self, artifact_id: str) -> Evaluation | None:
        self.calls.append("store.get")
        return self._by_id.get(artifact_id)

    async def get_artifact_by_key(self, key: CacheKey) -> Evaluation | None:
        self.calls.append("store.get")
        if self.fail_get:
            raise ArtifactStoreError(operation="read", reason="connection refused")
        artifact_id = self._by_key.get(key)
        return self._by_id[artifact_id] if artifact_id else None

    async def put_artifact(
        self, artifact: Evaluation, replace: bool = False
    ) -> Evaluation:
        self.calls.append("store.put")
        if self.fail_put:
            raise ArtifactStoreError(operation="store", reason="disk full")
        existing = self._by_key.get(artifact.key)
        if existing is None:
            return self.seed(artifact)
        if replace:
            self._by_id[existing] = artifact.model_copy(
                update={"id": existing, "cached": False}
            )
        return self._by_id[existing]

    async def list_artifacts(self, owner: str, name: str) -> list[Evaluation]:
        return [a for a in self._by_id.values() if a.owner == owner and a.repo == name]
