"""Analysis orchestrator: local heuristics, optional model pass, merge.

Per-invocation state machine:

    idle -> analyzing_local -> [analyzing_model] -> complete
                                      |
                                      +-> failed -> local_fallback

Both complete and local_fallback are terminal; local_fallback is the
local result flagged as degraded. Nothing here raises to the caller.
"""

import logging
from enum import Enum
from typing import Callable

from config import AtsPolicy, settings
from models.cv import CVDocument
from models.responses import AnalysisResult
from services import gemini_client, prompt_builder
from services.ats import merge, scorer

logger = logging.getLogger(__name__)


class AnalysisState(str, Enum):
    IDLE = "idle"
    ANALYZING_LOCAL = "analyzing_local"
    ANALYZING_MODEL = "analyzing_model"
    COMPLETE = "complete"
    FAILED = "failed"
    LOCAL_FALLBACK = "local_fallback"


_TRANSITIONS: dict[AnalysisState, frozenset[AnalysisState]] = {
    AnalysisState.IDLE: frozenset({AnalysisState.ANALYZING_LOCAL}),
    AnalysisState.ANALYZING_LOCAL: frozenset({
        AnalysisState.ANALYZING_MODEL, AnalysisState.COMPLETE, AnalysisState.FAILED,
    }),
    AnalysisState.ANALYZING_MODEL: frozenset({AnalysisState.COMPLETE, AnalysisState.FAILED}),
    AnalysisState.FAILED: frozenset({AnalysisState.LOCAL_FALLBACK}),
    AnalysisState.COMPLETE: frozenset(),
    AnalysisState.LOCAL_FALLBACK: frozenset(),
}

TERMINAL_STATES = frozenset({AnalysisState.COMPLETE, AnalysisState.LOCAL_FALLBACK})


class AnalysisRun:
    """Tracks one analysis invocation through its states."""

    def __init__(self, on_transition: Callable[[AnalysisState], None] | None = None):
        self.state = AnalysisState.IDLE
        self.history: list[AnalysisState] = [self.state]
        self._on_transition = on_transition

    def advance(self, new_state: AnalysisState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise ValueError(f"Illegal analysis transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)
        if self._on_transition is not None:
            self._on_transition(new_state)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES


async def request_model_assessment(
    cv: CVDocument, job_description: str, local: AnalysisResult
) -> dict | None:
    prompt = prompt_builder.build_ats_prompt(cv, job_description, local_result=local)
    return await gemini_client.generate_json(prompt)


async def analyze(
    cv: CVDocument,
    job_description: str = "",
    mode: str = "local",
    policy: AtsPolicy | None = None,
    run: AnalysisRun | None = None,
) -> AnalysisResult:
    """Score a CV; in hybrid mode blend with the model, degrading to local on any failure."""
    policy = policy or settings.ats
    run = run or AnalysisRun()

    run.advance(AnalysisState.ANALYZING_LOCAL)
    try:
        local = scorer.analyze_local(cv, job_description, policy)
    except Exception:
        # Heuristics are pure; reaching this is a bug, but callers still get a result
        logger.exception("Local ATS analysis failed")
        run.advance(AnalysisState.FAILED)
        run.advance(AnalysisState.LOCAL_FALLBACK)
        return AnalysisResult(mode=mode, status="local_fallback", degraded=True)

    if mode != "hybrid":
        run.advance(AnalysisState.COMPLETE)
        return local

    run.advance(AnalysisState.ANALYZING_MODEL)
    try:
        payload = await request_model_assessment(cv, job_description, local)
    except Exception:
        logger.exception("Model assessment request failed")
        payload = None

    assessment = merge.parse_assessment(payload)
    if assessment is None:
        logger.warning("Model assessment unavailable, using local heuristic score")
        run.advance(AnalysisState.FAILED)
        run.advance(AnalysisState.LOCAL_FALLBACK)
        return merge.local_fallback(local)

    run.advance(AnalysisState.COMPLETE)
    return merge.merge_results(local, assessment, policy)
