"""Durable storage configuration model."""

from pathlib import Path

from pydantic import BaseModel


class StorageConfig(BaseModel, frozen=True):
    path: Path = Path("git-eval.db")
