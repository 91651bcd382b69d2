"""Payroll run state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from staff_payroll.errors import PayrollError


class PayrollRunStatus(str, Enum):
    """Payroll run status values."""

    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    LOCKED = "LOCKED"


class RunAction(str, Enum):
    """Lifecycle operations on a payroll run."""

    APPROVE = "approve"
    LOCK = "lock"
    REJECT = "reject"
    DELETE = "delete"


class InvalidTransitionError(PayrollError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, action: str, required_status: str):
        self.from_status = str(getattr(from_status, "value", from_status))
        self.action = str(getattr(action, "value", action))
        self.required_status = str(getattr(required_status, "value", required_status))
        super().__init__(
            f"Only {self.required_status} payroll runs can be "
            f"{_past_tense(self.action)} (current: {self.from_status})",
            {
                "from_status": self.from_status,
                "action": self.action,
                "required_status": self.required_status,
            },
        )


class PayrollRunStateMachine:
    """State machine for payroll run status transitions.

    Allowed transitions:
    - DRAFT → APPROVED (approve)
    - APPROVED → LOCKED (lock)
    - APPROVED → DRAFT (reject)
    - DRAFT → removed (delete)

    LOCKED is terminal: no action is valid from it.
    """

    # {(from_status, action): to_status}; None means the run is removed
    TRANSITIONS: dict[tuple[PayrollRunStatus, RunAction], PayrollRunStatus | None] = {
        (PayrollRunStatus.DRAFT, RunAction.APPROVE): PayrollRunStatus.APPROVED,
        (PayrollRunStatus.APPROVED, RunAction.LOCK): PayrollRunStatus.LOCKED,
        (PayrollRunStatus.APPROVED, RunAction.REJECT): PayrollRunStatus.DRAFT,
        (PayrollRunStatus.DRAFT, RunAction.DELETE): None,
    }

    TERMINAL = {PayrollRunStatus.LOCKED}

    @classmethod
    def can_apply(cls, from_status: str, action: str) -> bool:
        """Check if an action is valid from a status."""
        try:
            key = (PayrollRunStatus(from_status), RunAction(action))
        except ValueError:
            return False
        return key in cls.TRANSITIONS

    @classmethod
    def required_status(cls, action: str) -> PayrollRunStatus:
        """The single source status an action is valid from."""
        action = RunAction(action)
        for (from_status, candidate), _ in cls.TRANSITIONS.items():
            if candidate == action:
                return from_status
        raise ValueError(f"Unknown action {action!r}")

    @classmethod
    def validate(cls, from_status: str, action: str) -> PayrollRunStatus | None:
        """Validate an action, returning the target status.

        Raises InvalidTransitionError if the action is not in the table.
        """
        if not cls.can_apply(from_status, action):
            raise InvalidTransitionError(from_status, action, cls.required_status(action))
        return cls.TRANSITIONS[(PayrollRunStatus(from_status), RunAction(action))]

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return PayrollRunStatus(status) in cls.TERMINAL

    @classmethod
    def get_allowed_actions(cls, current_status: str) -> list[RunAction]:
        """Get list of valid actions from current status."""
        status = PayrollRunStatus(current_status)
        return [action for (from_status, action) in cls.TRANSITIONS if from_status == status]


def _past_tense(action: str) -> str:
    return {
        RunAction.APPROVE: "approved",
        RunAction.LOCK: "locked",
        RunAction.REJECT: "rejected",
        RunAction.DELETE: "deleted",
    }[RunAction(action)]
