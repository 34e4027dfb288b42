"""Browser-driven ticket booking on the AMC consumer website.

AMC offers no commerce API to this service, so a booking is completed the
way a person would: sign in, open the seat map for the showtime, click seats,
check out and read the confirmation page. Each step moves a BookingAttempt
through the states in ``amcmcp.booking.states``.
"""

import logging
import re

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from amcmcp.booking import selectors as sel
from amcmcp.booking.browser import BrowserManager
from amcmcp.booking.sessions import SessionStore
from amcmcp.booking.states import TRANSITIONS, BookingAttempt, BookingState
from amcmcp.config import settings
from amcmcp.schemas import BookingDetails, BookingResult, BookTicketsInput, SeatPreferences

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Login failed - please check your credentials"
A_LIST_UNAVAILABLE_MESSAGE = (
    "A-List reservation could not be enabled - benefits may be exhausted or unavailable"
)


class BookingStepError(Exception):
    """A booking step failed; ``state`` is the failure state it ends in."""

    def __init__(self, message: str, state: BookingState = BookingState.FAILED) -> None:
        self.message = message
        self.state = state
        super().__init__(message)


def parse_price(text: str | None) -> float:
    """Parse a currency string such as "$31.98" by dropping non-numeric characters."""
    if not text:
        return 0.0
    try:
        return float(re.sub(r"[^0-9.]", "", text))
    except ValueError:
        return 0.0


class BookingDriver:
    """
    Drives one isolated browser context per booking attempt.

    The browser process is shared and owned by the BrowserManager; the
    session store is written once per successful booking.
    """

    def __init__(
        self,
        browser: BrowserManager,
        sessions: SessionStore,
        site_url: str | None = None,
        login_timeout_ms: int | None = None,
        seat_map_timeout_ms: int | None = None,
        confirmation_timeout_ms: int | None = None,
    ) -> None:
        self.browser = browser
        self.sessions = sessions
        self.site_url = (site_url or settings.amc_site_url).rstrip("/")
        self.login_timeout_ms = login_timeout_ms or settings.login_timeout_ms
        self.seat_map_timeout_ms = seat_map_timeout_ms or settings.seat_map_timeout_ms
        self.confirmation_timeout_ms = confirmation_timeout_ms or settings.confirmation_timeout_ms

    def showtime_url(self, theater_id: str, showtime_id: str) -> str:
        """
        Seat-selection URL for a showtime.

        The site addresses seat maps by showtime alone; the theater id is
        accepted for callers but not part of the URL.
        """
        return f"{self.site_url}/showtimes/{showtime_id}/seats"

    async def book_tickets(
        self, request: BookTicketsInput, attempt: BookingAttempt | None = None
    ) -> BookingResult:
        """
        Run the full booking flow.

        Args:
            request: Validated booking request
            attempt: Optional state tracker, for callers that want the state history

        Returns:
            BookingResult; never raises. success is True only when a
            confirmation number was read from the page.
        """
        attempt = attempt or BookingAttempt()
        context: BrowserContext | None = None
        page: Page | None = None

        try:
            context = await self.browser.new_context()
            attempt.advance(BookingState.BROWSER_LAUNCHED)
            page = await context.new_page()
            attempt.advance(BookingState.PAGE_OPEN)

            logger.info(
                f"Booking {request.seat_count} seat(s) for showtime "
                f"{request.showtime_id} as {request.email}"
            )
            await self._open_sign_in(page)
            attempt.advance(BookingState.LOGIN_PENDING)
            await self._login(page, request.email, request.password)
            attempt.advance(BookingState.LOGGED_IN)

            url = self.showtime_url(request.theater_id, request.showtime_id)
            logger.info(f"Navigating to showtime: {url}")
            await page.goto(url)
            await page.wait_for_load_state("networkidle")
            attempt.advance(BookingState.SHOWTIME_OPEN)

            attempt.advance(BookingState.SEATS_PENDING)
            seats = await self._select_seats(page, request.seat_count, request.seat_preferences)
            attempt.advance(BookingState.SEATS_SELECTED)

            if request.use_a_list:
                attempt.advance(BookingState.BENEFIT_PENDING)
                await self._enable_a_list(page)
                attempt.advance(BookingState.BENEFIT_APPLIED)

            attempt.advance(BookingState.CHECKOUT_PENDING)
            result = await self._complete_checkout(page, seats, a_list=request.use_a_list)
            attempt.advance(BookingState.CONFIRMED)

            self.sessions.record(request.email)
            logger.info(f"Booking completed successfully! Confirmation: {result.confirmation_number}")
            return result

        except BookingStepError as e:
            self._fail(attempt, e.state)
            logger.warning(f"Booking stopped in state {attempt.state.value}: {e.message}")
            return BookingResult.failed(e.message)

        except Exception as e:
            self._fail(attempt, BookingState.FAILED)
            logger.error(f"Error during ticket booking: {e}", exc_info=True)
            return BookingResult.failed(f"Booking automation failed: {e}")

        finally:
            attempt.advance(BookingState.CLEANUP)
            await self._close(page, context)

    @staticmethod
    def _fail(attempt: BookingAttempt, state: BookingState) -> None:
        if state not in TRANSITIONS[attempt.state]:
            state = BookingState.FAILED
        attempt.advance(state)

    @staticmethod
    async def _close(page: Page | None, context: BrowserContext | None) -> None:
        if page is not None:
            try:
                await page.close()
            except PlaywrightError as e:
                logger.debug(f"Error closing page: {e}")
        if context is not None:
            try:
                await context.close()
            except PlaywrightError as e:
                logger.debug(f"Error closing context: {e}")

    # ------------------------------------------------------------------
    # Sign in
    # ------------------------------------------------------------------

    async def _open_sign_in(self, page: Page) -> None:
        """Open the site and bring up the sign-in form, inline popup or page."""
        await page.goto(self.site_url)
        await page.wait_for_load_state("networkidle")

        button = await sel.first_visible(page, sel.SIGN_IN_BUTTON)
        if button is None:
            logger.debug("Sign-in button not found, trying alternative selectors")
            button = await sel.first_visible(page, sel.SIGN_IN_FALLBACK)
        if button is not None:
            await button.click()
            await page.wait_for_timeout(2000)  # popup animation

    async def _login(self, page: Page, email: str, password: str) -> None:
        try:
            if await sel.first_visible(page, sel.LOGIN_POPUP) is None:
                logger.debug("No sign-in popup found, looking for form elements on the page")

            await page.wait_for_selector(sel.any_of(sel.EMAIL_INPUT), timeout=self.login_timeout_ms)
            email_input = await sel.first_visible(page, sel.EMAIL_INPUT)
            password_input = await sel.first_visible(page, sel.PASSWORD_INPUT)
            if email_input is None or password_input is None:
                raise BookingStepError("Login failed - sign-in form not found", BookingState.LOGIN_FAILED)

            await email_input.fill(email)
            await password_input.fill(password)

            submit = await sel.first_visible(page, sel.LOGIN_SUBMIT)
            if submit is not None:
                await submit.click()
            else:
                await page.keyboard.press("Enter")
            await page.wait_for_load_state("networkidle")

            if await sel.count_matches(page, sel.SIGNED_IN_INDICATOR) > 0:
                logger.info(f"Login successful for {email}")
                return

            error_text = await sel.visible_text(page, sel.LOGIN_ERROR)
        except PlaywrightError as e:
            raise BookingStepError(f"Login failed: {e}", BookingState.LOGIN_FAILED) from e

        if error_text:
            raise BookingStepError(f"Login failed: {error_text}", BookingState.LOGIN_FAILED)
        raise BookingStepError(LOGIN_FAILED_MESSAGE, BookingState.LOGIN_FAILED)

    # ------------------------------------------------------------------
    # Seats
    # ------------------------------------------------------------------

    async def _select_seats(
        self, page: Page, seat_count: int, preferences: SeatPreferences | None
    ) -> list[str]:
        """
        Click the first ``seat_count`` available seats.

        Seat preferences are accepted but do not change which seats are
        picked; the seats are taken in the order the page lists them.
        """
        if preferences is not None:
            logger.info(
                f"Seat preferences {preferences.model_dump(exclude_none=True)} "
                "not applied; taking first available"
            )

        try:
            await page.wait_for_selector(sel.any_of(sel.SEAT_MAP), timeout=self.seat_map_timeout_ms)
            available = await sel.all_matches(page, sel.AVAILABLE_SEAT)
            logger.info(f"Found {len(available)} available seats")

            if len(available) < seat_count:
                raise BookingStepError(
                    f"Only {len(available)} seats available, requested {seat_count}",
                    BookingState.SEATS_INSUFFICIENT,
                )

            seats: list[str] = []
            for i, seat in enumerate(available[:seat_count]):
                await seat.click()
                seats.append(await seat.get_attribute("data-seat-id") or f"seat-{i}")
                await page.wait_for_timeout(500)

            selected = await sel.count_matches(page, sel.SELECTED_SEAT)
        except PlaywrightError as e:
            raise BookingStepError(f"Seat selection failed: {e}") from e

        if selected != seat_count:
            raise BookingStepError(
                f"Failed to select all requested seats. Selected: {selected}, Requested: {seat_count}"
            )
        logger.info(f"All {seat_count} seats selected: {', '.join(seats)}")
        return seats

    # ------------------------------------------------------------------
    # A-List benefit
    # ------------------------------------------------------------------

    async def _enable_a_list(self, page: Page) -> None:
        """Opt in to an A-List reservation: checkbox first, then text and button scan."""
        try:
            checkbox = await sel.first_visible(page, sel.A_LIST_CHECKBOX)
            if checkbox is not None:
                if not await checkbox.is_checked():
                    await checkbox.check()
                    await page.wait_for_timeout(1000)
                    if not await checkbox.is_checked():
                        logger.warning("A-List checkbox state did not update as expected")
                return

            if await sel.count_matches(page, sel.A_LIST_TEXT) > 0:
                button = await sel.first_visible(page, sel.A_LIST_BUTTON)
                if button is not None:
                    await button.click()
                    await page.wait_for_timeout(1000)
                    return
        except PlaywrightError as e:
            raise BookingStepError(
                f"A-List reservation failed: {e}", BookingState.BENEFIT_UNAVAILABLE
            ) from e

        raise BookingStepError(A_LIST_UNAVAILABLE_MESSAGE, BookingState.BENEFIT_UNAVAILABLE)

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    async def _complete_checkout(self, page: Page, seats: list[str], a_list: bool) -> BookingResult:
        if a_list:
            label = "A-List reservation"
            buttons = (sel.A_LIST_CONTINUE_BUTTON, sel.A_LIST_CONFIRM_BUTTON)
            confirmation_page = sel.A_LIST_CONFIRMATION_PAGE
        else:
            label = "Booking"
            buttons = (sel.CONTINUE_BUTTON, sel.CONFIRM_BUTTON)
            confirmation_page = sel.CONFIRMATION_PAGE

        try:
            # Both buttons are optional: some flows are already on the last step.
            for candidates in buttons:
                button = await sel.first_visible(page, candidates)
                if button is not None:
                    await button.click()
                    await page.wait_for_load_state("networkidle")

            await page.wait_for_selector(
                sel.any_of(confirmation_page), timeout=self.confirmation_timeout_ms
            )
            confirmation_number = await sel.visible_text(page, sel.CONFIRMATION_NUMBER)
        except PlaywrightError as e:
            raise BookingStepError(f"{label} completion failed: {e}") from e

        if not confirmation_number:
            raise BookingStepError(
                f"{label} completed but no confirmation number found",
                BookingState.CONFIRMATION_MISSING,
            )

        details = await self._extract_details(page, seats)
        return BookingResult.succeeded(confirmation_number, details)

    async def _extract_details(self, page: Page, seats: list[str]) -> BookingDetails:
        """Best-effort scrape of the confirmation page; missing text becomes "Unknown"."""
        try:
            return BookingDetails(
                movie_title=await sel.visible_text(page, sel.MOVIE_TITLE) or "Unknown",
                theater_name=await sel.visible_text(page, sel.THEATER_NAME) or "Unknown",
                showtime=await sel.visible_text(page, sel.SHOWTIME_TEXT) or "Unknown",
                seats=seats,
                total_price=parse_price(await sel.visible_text(page, sel.TOTAL_PRICE)),
            )
        except PlaywrightError as e:
            logger.debug(f"Could not read booking details: {e}")
            return BookingDetails(seats=seats)
