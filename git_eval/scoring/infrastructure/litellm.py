"""LiteLLMScorer — Scorer and DiagramGenerator backed by LiteLLM."""

import re
import time

import litellm

from git_eval.config.domain.scorer import ScorerConfig
from git_eval.core.errors import (
    CollaboratorTimeoutError,
    GitEvalError,
    MalformedResponseError,
    RateLimitedError,
    UpstreamError,
)
from git_eval.scoring.domain.observer import ScoringObserver
from git_eval.scoring.domain.score import ScoreReport, grade_for
from git_eval.scoring.domain.scorer import ScoringInput
from git_eval.scoring.infrastructure.prompts import (
    SCORING_SYSTEM_PROMPT,
    build_diagram_prompt,
    build_scoring_prompt,
)

_SERVICE = "LLM scorer"
_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n(?P<body>.*?)\n?```\s*$", re.DOTALL)


class LiteLLMScorer:
    """Scores repositories and draws architecture diagrams via an LLM.

    Provider failures are translated into the git-eval taxonomy: rate limits,
    timeouts and server-side failures become TransientErrors, an unusable
    answer becomes MalformedResponseError. The letter grade is always
    re-derived from ``overall_score`` so it cannot disagree with the number.
    """

    def __init__(self, config: ScorerConfig, observer: ScoringObserver) -> None:
        self._config = config
        self._observer = observer

    async def score(self, scoring_input: ScoringInput) -> ScoreReport:
        repo = scoring_input.repo_name
        self._observer.scoring_started(repo=repo, model=self._config.model)

        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
                timeout=self._config.timeout_seconds,
                response_format=ScoreReport,
                messages=[
                    {"role": "system", "content": SCORING_SYSTEM_PROMPT},
                    {"role": "user", "content": build_scoring_prompt(scoring_input)},
                ],
            )
        except Exception as exc:
            self._observer.scoring_failed(repo=repo, reason=str(exc))
            raise self._translate(exc, operation="score repository") from exc

        raw_content = response.choices[0].message.content
        try:
            report = ScoreReport.model_validate_json(raw_content or "")
        except ValueError as exc:
            error = MalformedResponseError(service=_SERVICE, reason=str(exc))
            self._observer.scoring_failed(repo=repo, reason=str(error))
            raise error from exc

        self._observer.scoring_completed(
            repo=repo, duration_ms=int((time.monotonic() - start) * 1000)
        )
        return report.model_copy(update={"grade": grade_for(report.overall_score)})

    async def generate_diagram(self, scoring_input: ScoringInput) -> str:
        start = time.monotonic()
        try:
            response = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.diagram_temperature,
                max_tokens=self._config.diagram_max_tokens,
                timeout=self._config.timeout_seconds,
                messages=[
                    {"role": "user", "content": build_diagram_prompt(scoring_input)},
                ],
            )
        except Exception as exc:
            raise self._translate(exc, operation="generate diagram") from exc

        diagram = _strip_code_fence(response.choices[0].message.content or "")
        if not diagram:
            raise MalformedResponseError(service=_SERVICE, reason="empty diagram")

        self._observer.diagram_completed(
            repo=scoring_input.repo_name,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return diagram

    def _translate(self, exc: Exception, operation: str) -> GitEvalError:
        if isinstance(exc, litellm.RateLimitError):
            return RateLimitedError(service=_SERVICE)
        if isinstance(exc, litellm.Timeout):
            return CollaboratorTimeoutError(
                operation=operation, timeout_seconds=self._config.timeout_seconds
            )
        if isinstance(
            exc,
            (
                litellm.APIConnectionError,
                litellm.InternalServerError,
                litellm.ServiceUnavailableError,
            ),
        ):
            return UpstreamError(
                service=_SERVICE,
                reason=str(exc),
                status_code=getattr(exc, "status_code", None),
            )
        return GitEvalError(f"Failed to {operation}: {exc}", retriable=False)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group("body").strip() if match else text
