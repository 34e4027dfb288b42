"""Browser automation for booking tickets on the AMC website."""

from amcmcp.booking.browser import BrowserManager
from amcmcp.booking.driver import BookingDriver, BookingStepError
from amcmcp.booking.sessions import SessionStore
from amcmcp.booking.states import BookingAttempt, BookingState, InvalidTransition

__all__ = [
    "BookingAttempt",
    "BookingDriver",
    "BookingState",
    "BookingStepError",
    "BrowserManager",
    "InvalidTransition",
    "SessionStore",
]
