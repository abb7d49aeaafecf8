"""PipelinePlan — ordered groups of stages with the progress reached after each."""

import itertools
from collections.abc import Sequence
from dataclasses import dataclass

from git_eval.pipeline.domain.errors import (
    InvalidPipelinePlanError,
    OverlappingStageWritesError,
)
from git_eval.pipeline.domain.stage import Stage
from git_eval.pipeline.domain.workspace import WorkspaceKey

OPTIMIZED_CHECKPOINTS: tuple[int, ...] = (5, 15, 55, 60, 85, 90, 95, 100)


@dataclass(frozen=True)
class StageGroup:
    """Stages that run concurrently; ``checkpoint`` is the progress once all finish."""

    stages: tuple[Stage, ...]
    checkpoint: int

    @property
    def is_concurrent(self) -> bool:
        return len(self.stages) > 1

    @property
    def names(self) -> list[str]:
        return [stage.name for stage in self.stages]


@dataclass(frozen=True)
class PipelinePlan:
    """Validated execution plan.

    Invariants checked on construction:
    - at least one group, none empty, stage names unique;
    - checkpoints strictly increasing, each in 1..100, the last exactly 100;
    - the first group is a single stage that writes ``cache_hit``;
    - every key a stage reads is written by a stage in an earlier group;
    - stages within one group write pairwise-disjoint keys.
    """

    groups: tuple[StageGroup, ...]

    def __post_init__(self) -> None:
        if not self.groups:
            raise InvalidPipelinePlanError("plan has no stage groups")

        seen: set[str] = set()
        for group in self.groups:
            if not group.stages:
                raise InvalidPipelinePlanError("plan contains an empty stage group")
            for name in group.names:
                if name in seen:
                    raise InvalidPipelinePlanError(f"stage {name!r} appears twice")
                seen.add(name)

        self._validate_checkpoints()
        self._validate_cache_lookup_first()
        self._validate_reads()
        for group in self.groups:
            _validate_disjoint_writes(group)

    @classmethod
    def sequential(cls, stages: Sequence[Stage]) -> "PipelinePlan":
        """One stage per group; progress after stage k of n is floor(k / n * 100)."""
        total = len(stages)
        return cls(
            groups=tuple(
                StageGroup(stages=(stage,), checkpoint=done * 100 // total)
                for done, stage in enumerate(stages, start=1)
            )
        )

    @classmethod
    def optimized(
        cls,
        cache_check: Stage,
        fetch: Stage,
        analysis: Sequence[Stage],
        metrics: Stage,
        reporting: Sequence[Stage],
        assembly: Stage,
        cache_write: Stage,
        cleanup: Stage,
    ) -> "PipelinePlan":
        """Run independent analyses, and scoring alongside its siblings, concurrently."""
        layout: list[tuple[Stage, ...]] = [
            (cache_check,),
            (fetch,),
            tuple(analysis),
            (metrics,),
            tuple(reporting),
            (assembly,),
            (cache_write,),
            (cleanup,),
        ]
        return cls(
            groups=tuple(
                StageGroup(stages=stages, checkpoint=checkpoint)
                for stages, checkpoint in zip(layout, OPTIMIZED_CHECKPOINTS, strict=True)
            )
        )

    @property
    def stages(self) -> list[Stage]:
        return [stage for group in self.groups for stage in group.stages]

    def _validate_checkpoints(self) -> None:
        previous = 0
        for group in self.groups:
            if not previous < group.checkpoint <= 100:
                raise InvalidPipelinePlanError(
                    f"checkpoint {group.checkpoint} after {group.names} must be"
                    f" greater than {previous} and at most 100"
                )
            previous = group.checkpoint
        if previous != 100:
            raise InvalidPipelinePlanError(f"last checkpoint is {previous}, not 100")

    def _validate_cache_lookup_first(self) -> None:
        first = self.groups[0]
        if first.is_concurrent or WorkspaceKey.CACHE_HIT not in first.stages[0].writes:
            raise InvalidPipelinePlanError(
                "the first group must be a single cache lookup stage"
            )

    def _validate_reads(self) -> None:
        available: set[WorkspaceKey] = set()
        for group in self.groups:
            for stage in group.stages:
                missing = stage.reads - available
                if missing:
                    raise InvalidPipelinePlanError(
                        f"stage {stage.name!r} reads"
                        f" {', '.join(sorted(k.value for k in missing))} before any"
                        f" earlier group writes it"
                    )
            for stage in group.stages:
                available |= stage.writes


def _validate_disjoint_writes(group: StageGroup) -> None:
    for first, second in itertools.combinations(group.stages, 2):
        overlap = first.writes & second.writes
        if overlap:
            raise OverlappingStageWritesError(
                first=first.name,
                second=second.name,
                keys=sorted(key.value for key in overlap),
            )
