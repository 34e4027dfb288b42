"""Candidate selectors for the AMC consumer website.

The site's markup is not under our control, so every lookup is an ordered
tuple of candidates tried in turn. The first candidate that matches wins.
"""

import logging
from collections.abc import Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

logger = logging.getLogger(__name__)

Candidates = Sequence[str]

SIGN_IN_BUTTON: Candidates = (
    'button:has-text("Sign In")',
    'a:has-text("Sign In")',
    '[data-testid="sign-in-button"]',
)
SIGN_IN_FALLBACK: Candidates = (
    '[data-testid*="sign"]',
    ".sign-in",
    ".login",
    '[aria-label*="sign"]',
)
LOGIN_POPUP: Candidates = (
    ".modal",
    ".popup",
    ".overlay",
    '[data-testid="modal"]',
    '[data-testid="popup"]',
    ".sign-in-modal",
    ".login-modal",
    ".auth-modal",
    ".signin-popup",
)
EMAIL_INPUT: Candidates = (
    'input[type="email"]',
    'input[name="email"]',
    'input[placeholder*="email"]',
)
PASSWORD_INPUT: Candidates = (
    'input[type="password"]',
    'input[name="password"]',
    'input[placeholder*="password"]',
)
LOGIN_SUBMIT: Candidates = (
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Sign In")',
    'button:has-text("Login")',
)
SIGNED_IN_INDICATOR: Candidates = (
    '[data-testid="user-menu"]',
    ".user-menu",
    ".account-menu",
    ".user-account",
    ".profile-menu",
)
LOGIN_ERROR: Candidates = (
    ".error-message",
    ".alert-error",
    '[data-testid="error"]',
    ".error",
    ".alert",
)

SEAT_MAP: Candidates = (".seat-map", '[data-testid="seat-map"]')
AVAILABLE_SEAT: Candidates = (".seat.available", ".seat:not(.occupied):not(.reserved)")
SELECTED_SEAT: Candidates = (".seat.selected",)

CONTINUE_BUTTON: Candidates = (
    'button:has-text("Continue")',
    'button:has-text("Checkout")',
    '[data-testid="continue-button"]',
)
CONFIRM_BUTTON: Candidates = (
    'button:has-text("Confirm")',
    'button:has-text("Book")',
    '[data-testid="confirm-booking"]',
)
CONFIRMATION_PAGE: Candidates = (
    ".confirmation",
    '[data-testid="confirmation"]',
    ".success-message",
)
CONFIRMATION_NUMBER: Candidates = (
    ".confirmation-number",
    '[data-testid="confirmation-number"]',
    ".order-number",
)
MOVIE_TITLE: Candidates = (".movie-title", '[data-testid="movie-title"]')
THEATER_NAME: Candidates = (".theater-name", '[data-testid="theater-name"]')
SHOWTIME_TEXT: Candidates = (".showtime", '[data-testid="showtime"]')
TOTAL_PRICE: Candidates = (".total-price", '[data-testid="total-price"]')

A_LIST_CHECKBOX: Candidates = (
    'input[type="checkbox"]:has-text("Make this one of my AMC Stubs A-List movie reservations")',
    'input[type="checkbox"][name*="alist"]',
    'input[type="checkbox"][id*="alist"]',
    '[data-testid*="alist-checkbox"]',
)
A_LIST_TEXT: Candidates = ('text="A-List"', 'text="AMC Stubs"', 'text="free reservation"')
A_LIST_BUTTON: Candidates = (
    'button:has-text("A-List")',
    'button:has-text("Use A-List")',
    '[data-testid*="alist"]',
)
A_LIST_CONTINUE_BUTTON: Candidates = (*CONTINUE_BUTTON, 'button:has-text("Reserve")')
A_LIST_CONFIRM_BUTTON: Candidates = (*CONFIRM_BUTTON, 'button:has-text("Reserve")')
A_LIST_CONFIRMATION_PAGE: Candidates = (*CONFIRMATION_PAGE, ".reservation-confirmed")


def any_of(candidates: Candidates) -> str:
    """Join candidates into one selector list, for waits that accept any of them."""
    return ", ".join(candidates)


async def first_visible(page: Page, candidates: Candidates) -> Locator | None:
    """Return the first candidate whose first match is visible, or None."""
    for selector in candidates:
        locator = page.locator(selector).first
        try:
            if await locator.is_visible():
                return locator
        except PlaywrightError as e:
            logger.debug(f"Selector {selector!r} could not be evaluated: {e}")
    return None


async def count_matches(page: Page, candidates: Candidates) -> int:
    """Return the match count of the first candidate that matches anything."""
    for selector in candidates:
        try:
            count = await page.locator(selector).count()
        except PlaywrightError as e:
            logger.debug(f"Selector {selector!r} could not be evaluated: {e}")
            continue
        if count:
            return count
    return 0


async def all_matches(page: Page, candidates: Candidates) -> list[Locator]:
    """Return every element matched by the first candidate that matches anything."""
    for selector in candidates:
        try:
            matches = await page.locator(selector).all()
        except PlaywrightError as e:
            logger.debug(f"Selector {selector!r} could not be evaluated: {e}")
            continue
        if matches:
            return matches
    return []


async def visible_text(page: Page, candidates: Candidates) -> str | None:
    """Return the stripped text of the first visible candidate, or None."""
    locator = await first_visible(page, candidates)
    if locator is None:
        return None
    text = await locator.text_content()
    return text.strip() if text else None
