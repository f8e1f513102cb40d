"""State machine for the pagination controller."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class PaginationState(str, Enum):
    """Lifecycle of a listing session.

    - UNINITIALIZED: No listing loaded (initial state, and after reset)
    - READY: Listing fetched and sorted; pages can be loaded
    """

    UNINITIALIZED = "UNINITIALIZED"
    READY = "READY"


# Valid state transitions
_VALID_TRANSITIONS: dict[PaginationState, set[PaginationState]] = {
    PaginationState.UNINITIALIZED: {PaginationState.READY},
    # Re-initializing replaces the listing; reset drops it
    PaginationState.READY: {PaginationState.READY, PaginationState.UNINITIALIZED},
}


class PaginationStateError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(self, from_state: PaginationState, to_state: PaginationState) -> None:
        """Initialize the transition error.

        Args:
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal pagination state transition: "
            f"{from_state.value} -> {to_state.value}"
        )


class PaginationStateMachine:
    """Manages state transitions for a pagination controller.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        run_id: str,
        initial_state: PaginationState = PaginationState.UNINITIALIZED,
    ) -> None:
        """Initialize the state machine.

        Args:
            run_id: Identifier for the current run.
            initial_state: Starting state.
        """
        self._state = initial_state
        self._log = logger.bind(component="pagination", run_id=run_id)

    @property
    def state(self) -> PaginationState:
        """Get the current state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """Check if a listing is loaded."""
        return self._state == PaginationState.READY

    def can_transition_to(self, target: PaginationState) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: PaginationState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            PaginationStateError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise PaginationStateError(self._state, target)

        old_state = self._state
        self._state = target

        self._log.info(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_ready(self) -> None:
        """Transition to READY state."""
        self.transition_to(PaginationState.READY)

    def to_uninitialized(self) -> None:
        """Transition to UNINITIALIZED state, a no-op if already there."""
        if self._state == PaginationState.UNINITIALIZED:
            return
        self.transition_to(PaginationState.UNINITIALIZED)
