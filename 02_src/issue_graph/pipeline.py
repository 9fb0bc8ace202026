"""Phase contract and the sequential runner for issue graph builds."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Tuple

from .errors import PipelineError
from .logging_utils import get_logger

logger = get_logger(__name__)


class PipelinePhase(ABC):
    """One step of a build; reads the shared context, returns new keys.

    ``requires`` names context keys that must be present and not None
    before the phase may run.
    """

    phase_name: str
    requires: Tuple[str, ...] = ()

    def missing_inputs(self, context: Dict[str, Any]) -> List[str]:
        return [key for key in self.requires if context.get(key) is None]

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    def __init__(self, phases: Iterable[PipelinePhase]) -> None:
        self.phases: List[PipelinePhase] = list(phases)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Run every phase in order; ``completed_phases`` lists those that ran."""
        current = dict(context)
        completed: List[str] = []
        for phase in self.phases:
            missing = phase.missing_inputs(current)
            if missing:
                raise PipelineError(phase.phase_name, missing)
            phase_result = phase.run(current)
            if not isinstance(phase_result, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            logger.debug("Phase %s produced %s", phase.phase_name, sorted(phase_result))
            current.update(phase_result)
            completed.append(phase.phase_name)
        current["completed_phases"] = completed
        return current
