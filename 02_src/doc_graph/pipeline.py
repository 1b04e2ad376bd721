"""Build phases and the sequential runner that chains them."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


class PipelinePhase(ABC):
    """One build stage. Reads the shared context and returns the keys it adds."""

    phase_name: str

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    """Runs phases in order over a copy of the context.

    Each phase sees everything earlier phases added. Phase names must be
    unique; per-phase wall time in milliseconds ends up under
    `phase_timings` in the returned context.
    """

    def __init__(self, phases: Iterable[PipelinePhase]) -> None:
        self.phases: List[PipelinePhase] = list(phases)
        names = [phase.phase_name for phase in self.phases]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate phase names: {names}")

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        current = dict(context)
        timings: Dict[str, float] = {}
        for phase in self.phases:
            started = time.perf_counter()
            phase_result = phase.run(current)
            if not isinstance(phase_result, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            current.update(phase_result)
            timings[phase.phase_name] = (time.perf_counter() - started) * 1000.0
            logger.debug("Phase %s finished in %.1f ms", phase.phase_name, timings[phase.phase_name])
        current["phase_timings"] = timings
        return current
