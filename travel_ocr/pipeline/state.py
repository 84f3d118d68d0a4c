"""Per-unit processing state machine.

Every processing unit moves ``pending -> processing`` and then to exactly
one terminal state, ``mapped`` or ``failed``.
"""

from enum import StrEnum
from typing import Final

from travel_ocr.exceptions import InvalidStateTransitionError
from travel_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class UnitState(StrEnum):
    """Lifecycle states of a processing unit."""

    PENDING = "pending"
    PROCESSING = "processing"
    MAPPED = "mapped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES: Final[frozenset[UnitState]] = frozenset(
    {UnitState.MAPPED, UnitState.FAILED}
)

VALID_TRANSITIONS: Final[dict[UnitState, frozenset[UnitState]]] = {
    UnitState.PENDING: frozenset({UnitState.PROCESSING}),
    UnitState.PROCESSING: frozenset({UnitState.MAPPED, UnitState.FAILED}),
    UnitState.MAPPED: frozenset(),
    UnitState.FAILED: frozenset(),
}


def is_valid_transition(current: UnitState, new: UnitState) -> bool:
    """Check whether ``current -> new`` is allowed."""
    return new in VALID_TRANSITIONS[current]


def validate_transition(current: UnitState, new: UnitState) -> None:
    """Raise if ``current -> new`` is not allowed.

    Raises:
        InvalidStateTransitionError: For any disallowed transition.
    """
    if not is_valid_transition(current, new):
        raise InvalidStateTransitionError(
            current=current.value,
            new=new.value,
            allowed=sorted(s.value for s in VALID_TRANSITIONS[current]),
        )


class UnitStateMachine:
    """Tracks the state of one processing unit.

    Args:
        unit_label: Identifier used in log messages.
    """

    def __init__(self, unit_label: str) -> None:
        self.unit_label = unit_label
        self.state = UnitState.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def transition(self, new: UnitState) -> None:
        """Move to ``new``, enforcing the allowed transitions."""
        validate_transition(self.state, new)
        logger.debug("Unit %s: %s -> %s", self.unit_label, self.state, new)
        self.state = new
