"""SqliteStore — aiosqlite-backed JobStore, ArtifactStore and ProfileStore."""

import json
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite
from pydantic import ValidationError

from git_eval.artifact.domain.evaluation import Evaluation
from git_eval.artifact.domain.key import CacheKey
from git_eval.core.errors import ArtifactStoreError, JobNotFoundError, JobStoreError
from git_eval.job.domain.errors import InvalidJobTransitionError
from git_eval.job.domain.job import (
    JobKind,
    JobRecord,
    JobStatus,
    JobUpdate,
    apply_update,
)
from git_eval.profile.domain.profile import UserProfile

_SCHEMA = """
CREATE TABLE IF NOT EXISTS jobs (
    id TEXT PRIMARY KEY,
    kind TEXT NOT NULL CHECK (kind IN ('repository', 'user_profile')),
    payload TEXT NOT NULL,
    status TEXT NOT NULL
        CHECK (status IN ('pending', 'processing', 'completed', 'failed')),
    progress INTEGER NOT NULL DEFAULT 0 CHECK (progress >= 0 AND progress <= 100),
    error TEXT,
    error_code TEXT,
    retriable INTEGER,
    result_id TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    started_at TEXT,
    completed_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs(status);
CREATE INDEX IF NOT EXISTS idx_jobs_created_at ON jobs(created_at);

CREATE TABLE IF NOT EXISTS evaluations (
    id TEXT PRIMARY KEY,
    owner TEXT NOT NULL,
    repo TEXT NOT NULL,
    commit_sha TEXT NOT NULL,
    body TEXT NOT NULL,
    evaluated_at TEXT NOT NULL,
    UNIQUE (owner, repo, commit_sha)
);
CREATE INDEX IF NOT EXISTS idx_evaluations_owner_repo ON evaluations(owner, repo);

CREATE TABLE IF NOT EXISTS user_profiles (
    id TEXT PRIMARY KEY,
    username TEXT NOT NULL UNIQUE,
    body TEXT NOT NULL,
    evaluated_at TEXT NOT NULL
);
"""

# The row keeps its id; the new body is rewritten to carry that id.
_REPLACE_ARTIFACT = (
    " DO UPDATE SET body = json_set(excluded.body, '$.id', evaluations.id),"
    " evaluated_at = excluded.evaluated_at"
)

_JOB_COLUMNS = (
    "id, kind, payload, status, progress, error, error_code, retriable,"
    " result_id, created_at, updated_at, started_at, completed_at"
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class SqliteStore:
    """One SQLite database holding jobs, evaluation artifacts and user profiles.

    Satisfies JobStore, ArtifactStore and ProfileStore structurally. Every
    public call commits on its own; no transaction spans more than one call.
    """

    def __init__(
        self,
        connection: aiosqlite.Connection,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._conn = connection
        self._clock = clock

    @classmethod
    async def open(
        cls, path: Path | str, clock: Callable[[], datetime] = _utcnow
    ) -> "SqliteStore":
        """Connect to *path* (":memory:" allowed) and ensure the schema exists."""
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        connection = await aiosqlite.connect(path)
        connection.row_factory = aiosqlite.Row
        store = cls(connection=connection, clock=clock)
        await store._conn.executescript(_SCHEMA)
        await store._conn.commit()
        return store

    async def close(self) -> None:
        await self._conn.close()

    # ------------------------------------------------------------------
    # JobStore
    # ------------------------------------------------------------------

    async def create_job(self, kind: JobKind, payload: dict[str, Any]) -> JobRecord:
        now = self._clock()
        job = JobRecord(
            id=str(uuid.uuid4()),
            kind=kind,
            payload=payload,
            created_at=now,
            updated_at=now,
        )
        try:
            await self._conn.execute(
                f"INSERT INTO jobs ({_JOB_COLUMNS})"
                " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _job_row(job),
            )
            await self._conn.commit()
        except aiosqlite.Error as exc:
            raise JobStoreError(operation="create", reason=str(exc)) from exc
        return job

    async def claim_job(self, job_id: str) -> JobRecord:
        now = _iso(self._clock())
        try:
            cursor = await self._conn.execute(
                "UPDATE jobs SET status = ?, started_at = ?, updated_at = ?"
                " WHERE id = ? AND status = ?",
                (JobStatus.PROCESSING.value, now, now, job_id, JobStatus.PENDING.value),
            )
            await self._conn.commit()
        except aiosqlite.Error as exc:
            raise JobStoreError(operation="claim", reason=str(exc)) from exc

        job = await self.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id=job_id)
        if cursor.rowcount == 0:
            raise InvalidJobTransitionError(
                job_id=job_id,
                current=job.status.value,
                target=JobStatus.PROCESSING.value,
            )
        return job

    async def update_job(self, job_id: str, update: JobUpdate) -> JobRecord:
        current = await self.get_job(job_id)
        if current is None:
            raise JobNotFoundError(job_id=job_id)
        updated = apply_update(job=current, update=update, now=self._clock())
        try:
            cursor = await self._conn.execute(
                "UPDATE jobs SET status = ?, progress = ?, error = ?, error_code = ?,"
                " retriable = ?, result_id = ?, updated_at = ?, started_at = ?,"
                " completed_at = ? WHERE id = ? AND status = ? AND progress <= ?",
                (
                    updated.status.value,
                    updated.progress,
                    updated.error,
                    updated.error_code.value if updated.error_code else None,
                    None if updated.retriable is None else int(updated.retriable),
                    updated.result_id,
                    _iso(updated.updated_at),
                    _iso(updated.started_at),
                    _iso(updated.completed_at),
                    job_id,
                    current.status.value,
                    updated.progress,
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as exc:
            raise JobStoreError(operation="update", reason=str(exc)) from exc
        if cursor.rowcount == 0:
            raise JobStoreError(
                operation="update", reason=f"job {job_id} changed concurrently"
            )
        return updated

    async def get_job(self, job_id: str) -> JobRecord | None:
        try:
            async with self._conn.execute(
                f"SELECT {_JOB_COLUMNS} FROM jobs WHERE id = ?", (job_id,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise JobStoreError(operation="read", reason=str(exc)) from exc
        return _job_from_row(row) if row is not None else None

    async def list_jobs(
        self, status: JobStatus | None = None, limit: int = 10
    ) -> list[JobRecord]:
        query = f"SELECT {_JOB_COLUMNS} FROM jobs"
        params: tuple[Any, ...] = ()
        if status is not None:
            query += " WHERE status = ?"
            params = (status.value,)
        query += " ORDER BY created_at ASC LIMIT ?"
        try:
            async with self._conn.execute(query, (*params, limit)) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise JobStoreError(operation="list", reason=str(exc)) from exc
        return [_job_from_row(row) for row in rows]

    # ------------------------------------------------------------------
    # ArtifactStore
    # ------------------------------------------------------------------

    async def get_artifact(self, artifact_id: str) -> Evaluation | None:
        return await self._fetch_artifact(
            "SELECT body FROM evaluations WHERE id = ?", (artifact_id,)
        )

    async def get_artifact_by_key(self, key: CacheKey) -> Evaluation | None:
        return await self._fetch_artifact(
            "SELECT body FROM evaluations"
            " WHERE owner = ? AND repo = ? AND commit_sha = ?",
            (key.owner, key.name, key.version),
        )

    async def put_artifact(
        self, artifact: Evaluation, replace: bool = False
    ) -> Evaluation:
        candidate = artifact.model_copy(
            update={"id": artifact.id or str(uuid.uuid4()), "cached": False}
        )
        on_conflict = _REPLACE_ARTIFACT if replace else " DO NOTHING"
        try:
            await self._conn.execute(
                "INSERT INTO evaluations"
                " (id, owner, repo, commit_sha, body, evaluated_at)"
                " VALUES (?, ?, ?, ?, ?, ?)"
                " ON CONFLICT (owner, repo, commit_sha)" + on_conflict,
                (
                    candidate.id,
                    candidate.owner,
                    candidate.repo,
                    candidate.commit_sha,
                    candidate.model_dump_json(),
                    _iso(candidate.evaluated_at),
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as exc:
            raise ArtifactStoreError(operation="store", reason=str(exc)) from exc

        stored = await self.get_artifact_by_key(candidate.key)
        if stored is None:
            raise ArtifactStoreError(
                operation="store", reason=f"{candidate.key} not readable after write"
            )
        return stored

    async def list_artifacts(self, owner: str, name: str) -> list[Evaluation]:
        try:
            async with self._conn.execute(
                "SELECT body FROM evaluations WHERE owner = ? AND repo = ?"
                " ORDER BY evaluated_at DESC",
                (owner, name),
            ) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise ArtifactStoreError(operation="list", reason=str(exc)) from exc
        return [_artifact_from_body(row["body"]) for row in rows]

    async def _fetch_artifact(
        self, query: str, params: tuple[str, ...]
    ) -> Evaluation | None:
        try:
            async with self._conn.execute(query, params) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise ArtifactStoreError(operation="read", reason=str(exc)) from exc
        return _artifact_from_body(row["body"]) if row is not None else None

    # ------------------------------------------------------------------
    # ProfileStore
    # ------------------------------------------------------------------

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        existing = await self.get_profile(profile.username)
        saved = profile.model_copy(
            update={"id": existing.id if existing else str(uuid.uuid4())}
        )
        try:
            await self._conn.execute(
                "INSERT INTO user_profiles (id, username, body, evaluated_at)"
                " VALUES (?, ?, ?, ?)"
                " ON CONFLICT (username) DO UPDATE SET"
                " body = excluded.body, evaluated_at = excluded.evaluated_at",
                (
                    saved.id,
                    saved.username,
                    saved.model_dump_json(),
                    _iso(saved.evaluated_at),
                ),
            )
            await self._conn.commit()
        except aiosqlite.Error as exc:
            raise ArtifactStoreError(operation="store profile", reason=str(exc)) from exc
        return saved

    async def get_profile(self, username: str) -> UserProfile | None:
        try:
            async with self._conn.execute(
                "SELECT body FROM user_profiles WHERE username = ?", (username,)
            ) as cursor:
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise ArtifactStoreError(operation="read profile", reason=str(exc)) from exc
        return UserProfile.model_validate_json(row["body"]) if row is not None else None


def _job_row(job: JobRecord) -> tuple[Any, ...]:
    return (
        job.id,
        job.kind.value,
        json.dumps(job.payload),
        job.status.value,
        job.progress,
        job.error,
        job.error_code.value if job.error_code else None,
        None if job.retriable is None else int(job.retriable),
        job.result_id,
        _iso(job.created_at),
        _iso(job.updated_at),
        _iso(job.started_at),
        _iso(job.completed_at),
    )


def _job_from_row(row: aiosqlite.Row) -> JobRecord:
    retriable = row["retriable"]
    return JobRecord(
        id=row["id"],
        kind=JobKind(row["kind"]),
        payload=json.loads(row["payload"]),
        status=JobStatus(row["status"]),
        progress=row["progress"],
        error=row["error"],
        error_code=row["error_code"],
        retriable=None if retriable is None else bool(retriable),
        result_id=row["result_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        started_at=row["started_at"],
        completed_at=row["completed_at"],
    )


def _artifact_from_body(body: str) -> Evaluation:
    try:
        return Evaluation.model_validate_json(body)
    except ValidationError as exc:
        raise ArtifactStoreError(operation="decode", reason=str(exc)) from exc
