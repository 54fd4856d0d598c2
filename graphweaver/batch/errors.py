"""
Error taxonomy for batch processing.

Validation errors reject a request before it runs, orchestration errors
abort a run, and per-file errors never leave the scheduler.
"""


class BatchError(Exception):
    """Base class for batch processing errors."""


class BatchValidationError(BatchError, ValueError):
    """Malformed batch request or processing options."""


class InvalidStateTransition(BatchError):
    """Requested state transition is not allowed from the current state."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(
            f"Illegal transition: {getattr(current, 'value', current)} -> "
            f"{getattr(target, 'value', target)}"
        )


class OrchestrationError(BatchError):
    """Failure of the batch machinery itself (not attributable to one file)."""


class BatchCancelledError(OrchestrationError):
    """Run aborted because the orchestrator was destroyed."""
