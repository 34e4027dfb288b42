"""States and legal transitions of one browser booking attempt."""

from enum import Enum


class BookingState(str, Enum):
    IDLE = "idle"
    BROWSER_LAUNCHED = "browser_launched"
    PAGE_OPEN = "page_open"
    LOGIN_PENDING = "login_pending"
    LOGGED_IN = "logged_in"
    LOGIN_FAILED = "login_failed"
    SHOWTIME_OPEN = "showtime_open"
    SEATS_PENDING = "seats_pending"
    SEATS_SELECTED = "seats_selected"
    SEATS_INSUFFICIENT = "seats_insufficient"
    BENEFIT_PENDING = "benefit_pending"
    BENEFIT_APPLIED = "benefit_applied"
    BENEFIT_UNAVAILABLE = "benefit_unavailable"
    CHECKOUT_PENDING = "checkout_pending"
    CONFIRMED = "confirmed"
    CONFIRMATION_MISSING = "confirmation_missing"
    FAILED = "failed"
    CLEANUP = "cleanup"


S = BookingState

_FORWARD: dict[BookingState, frozenset[BookingState]] = {
    S.IDLE: frozenset({S.BROWSER_LAUNCHED}),
    S.BROWSER_LAUNCHED: frozenset({S.PAGE_OPEN}),
    S.PAGE_OPEN: frozenset({S.LOGIN_PENDING}),
    S.LOGIN_PENDING: frozenset({S.LOGGED_IN, S.LOGIN_FAILED}),
    S.LOGGED_IN: frozenset({S.SHOWTIME_OPEN}),
    S.LOGIN_FAILED: frozenset(),
    S.SHOWTIME_OPEN: frozenset({S.SEATS_PENDING}),
    S.SEATS_PENDING: frozenset({S.SEATS_SELECTED, S.SEATS_INSUFFICIENT}),
    S.SEATS_SELECTED: frozenset({S.BENEFIT_PENDING, S.CHECKOUT_PENDING}),
    S.SEATS_INSUFFICIENT: frozenset(),
    S.BENEFIT_PENDING: frozenset({S.BENEFIT_APPLIED, S.BENEFIT_UNAVAILABLE}),
    S.BENEFIT_APPLIED: frozenset({S.CHECKOUT_PENDING}),
    S.BENEFIT_UNAVAILABLE: frozenset(),
    S.CHECKOUT_PENDING: frozenset({S.CONFIRMED, S.CONFIRMATION_MISSING}),
    S.CONFIRMED: frozenset(),
    S.CONFIRMATION_MISSING: frozenset(),
    S.FAILED: frozenset(),
    S.CLEANUP: frozenset(),
}

# Any state may fail or be cleaned up, except cleanup itself.
TRANSITIONS: dict[BookingState, frozenset[BookingState]] = {
    state: targets if state is S.CLEANUP else targets | {S.FAILED, S.CLEANUP}
    for state, targets in _FORWARD.items()
}

TERMINAL_FAILURES = frozenset(
    {
        S.LOGIN_FAILED,
        S.SEATS_INSUFFICIENT,
        S.BENEFIT_UNAVAILABLE,
        S.CONFIRMATION_MISSING,
        S.FAILED,
    }
)


class InvalidTransition(RuntimeError):
    """A booking step tried to move to a state not reachable from the current one."""


class BookingAttempt:
    """Tracks the state of one booking attempt and enforces the transition table."""

    def __init__(self) -> None:
        self.state = BookingState.IDLE
        self.history: list[BookingState] = [BookingState.IDLE]

    def advance(self, target: BookingState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {target.value}")
        self.state = target
        self.history.append(target)

    @property
    def failed_at(self) -> BookingState | None:
        """The terminal failure state reached, if any."""
        for state in reversed(self.history):
            if state in TERMINAL_FAILURES:
                return state
        return None
