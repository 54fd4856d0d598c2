"""
Processing state machine.
Single source of truth for the orchestrator's state.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from config.logging_config import get_logger
from .errors import InvalidStateTransition
from .models import Clock, ProcessingState, now_ms

logger = get_logger(__name__)


# Legal transitions: Idle -> Running <-> Paused, Running -> Idle,
# Running|Paused -> Error, Error -> Idle
TRANSITIONS: Dict[ProcessingState, FrozenSet[ProcessingState]] = {
    ProcessingState.IDLE: frozenset({ProcessingState.RUNNING}),
    ProcessingState.RUNNING: frozenset({
        ProcessingState.PAUSED,
        ProcessingState.IDLE,
        ProcessingState.ERROR,
    }),
    ProcessingState.PAUSED: frozenset({
        ProcessingState.RUNNING,
        ProcessingState.ERROR,
    }),
    ProcessingState.ERROR: frozenset({ProcessingState.IDLE}),
}


@dataclass(frozen=True)
class StateTransition:
    """One recorded transition."""
    previous: ProcessingState
    current: ProcessingState
    timestamp: float
    reason: str = ""


TransitionListener = Callable[[StateTransition], None]


class ProcessingStateMachine:
    """
    Holds the canonical ProcessingState and enforces legal transitions.

    Transitions are applied synchronously on the caller's thread, so two
    transitions can never interleave. Listeners are notified in order
    after the state has changed.

    Usage:
        machine = ProcessingStateMachine()
        machine.transition_to(ProcessingState.RUNNING, "batch started")
        machine.can_transition(ProcessingState.PAUSED)  # True
    """

    def __init__(self, clock: Clock = now_ms):
        self.clock = clock
        self._state = ProcessingState.IDLE
        self._entered_at = clock()
        self._listeners: List[TransitionListener] = []
        self.history: List[StateTransition] = []
        self.last_error: Optional[str] = None

    @property
    def state(self) -> ProcessingState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is ProcessingState.IDLE

    @property
    def is_active(self) -> bool:
        """Running or paused: a run is in progress."""
        return self._state in (ProcessingState.RUNNING, ProcessingState.PAUSED)

    def add_listener(self, listener: TransitionListener):
        self._listeners.append(listener)

    def can_transition(self, target: ProcessingState) -> bool:
        return target in TRANSITIONS[self._state]

    def transition_to(self, target: ProcessingState, reason: str = "") -> StateTransition:
        """
        Move to a new state.

        Args:
            target: Target state
            reason: Short description for logs and history

        Returns:
            The recorded transition

        Raises:
            InvalidStateTransition: If target is not reachable from the current state
        """
        if not self.can_transition(target):
            raise InvalidStateTransition(self._state, target)

        previous = self._state
        now = self.clock()
        self._state = target
        self._entered_at = now

        if target is ProcessingState.ERROR:
            self.last_error = reason or None
        elif target is ProcessingState.IDLE:
            self.last_error = None

        transition = StateTransition(previous, target, now, reason)
        self.history.append(transition)

        logger.info(f"State: {previous.value} → {target.value}" + (f" ({reason})" if reason else ""))

        for listener in self._listeners:
            listener(transition)

        return transition

    def time_in_state_ms(self) -> float:
        return self.clock() - self._entered_at

    def get_state_summary(self) -> Dict[str, Any]:
        """Get current state summary."""
        return {
            "state": self._state.value,
            "time_in_state_ms": self.time_in_state_ms(),
            "last_error": self.last_error,
            "transitions": len(self.history),
        }
