"""In-memory stand-ins for the Playwright objects the booking driver touches.

A FakePage is a flat map of selector -> elements. Every selector the driver
asks for is looked up verbatim, so tests lay out a page by adding elements
under the exact selectors the site is expected to match.
"""

from collections.abc import Callable
from typing import Any

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from amcmcp.booking import BookingDriver, SessionStore


class FakeElement:
    def __init__(
        self,
        text: str | None = None,
        attrs: dict[str, str] | None = None,
        visible: bool = True,
        checked: bool = False,
        on_click: Callable[["FakeElement"], None] | None = None,
    ) -> None:
        self.text = text
        self.attrs = attrs or {}
        self.visible = visible
        self.checked = checked
        self.on_click = on_click
        self.clicks = 0
        self.value: str | None = None


class FakeLocator:
    def __init__(self, selector: str, elements: list[FakeElement]) -> None:
        self.selector = selector
        self._elements = elements

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.selector, self._elements[:1])

    def _one(self) -> FakeElement:
        if not self._elements:
            raise PlaywrightTimeoutError(f"Timeout waiting for {self.selector}")
        return self._elements[0]

    async def is_visible(self) -> bool:
        return bool(self._elements) and self._elements[0].visible

    async def count(self) -> int:
        return len(self._elements)

    async def all(self) -> list["FakeLocator"]:
        return [FakeLocator(self.selector, [element]) for element in self._elements]

    async def click(self) -> None:
        element = self._one()
        element.clicks += 1
        if element.on_click is not None:
            element.on_click(element)

    async def fill(self, value: str) -> None:
        self._one().value = value

    async def text_content(self) -> str | None:
        return self._one().text

    async def get_attribute(self, name: str) -> str | None:
        return self._one().attrs.get(name)

    async def is_checked(self) -> bool:
        return self._one().checked

    async def check(self) -> None:
        self._one().checked = True


class FakeKeyboard:
    def __init__(self) -> None:
        self.pressed: list[str] = []

    async def press(self, key: str) -> None:
        self.pressed.append(key)


class FakePage:
    def __init__(self) -> None:
        self.elements: dict[str, list[FakeElement]] = {}
        self.visited: list[str] = []
        self.keyboard = FakeKeyboard()
        self.closed = False
        self.goto_error: Exception | None = None

    def add(self, selector: str, **kwargs: Any) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def remove(self, selector: str) -> None:
        self.elements.pop(selector, None)

    def add_seats(self, count: int) -> list[FakeElement]:
        """Available seats that move to ``.seat.selected`` when clicked."""

        def select(seat: FakeElement) -> None:
            self.elements.setdefault(".seat.selected", []).append(seat)

        return [
            self.add(".seat.available", attrs={"data-seat-id": f"F{i + 1}"}, on_click=select)
            for i in range(count)
        ]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(selector, self.elements.get(selector, []))

    async def goto(self, url: str) -> None:
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)

    async def wait_for_load_state(self, state: str = "load") -> None:
        return None

    async def wait_for_timeout(self, timeout: float) -> None:
        return None

    async def wait_for_selector(self, selector: str, timeout: float | None = None) -> FakeLocator:
        for candidate in selector.split(", "):
            if self.elements.get(candidate):
                return self.locator(candidate)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.closed = False

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.closed = True


class FakeBrowserManager:
    def __init__(self, context: FakeContext) -> None:
        self.context = context
        self.launch_error: Exception | None = None

    async def new_context(self) -> FakeContext:
        if self.launch_error is not None:
            raise self.launch_error
        return self.context


def _lay_out_happy_path(page: FakePage, seats: int = 4) -> None:
    """Sign-in form, seat map, checkout buttons and a confirmation page."""
    page.add('button:has-text("Sign In")')
    page.add('input[type="email"]')
    page.add('input[type="password"]')
    page.add('button[type="submit"]')
    page.add('[data-testid="user-menu"]')
    page.add(".seat-map")
    page.add_seats(seats)
    page.add('button:has-text("Continue")')
    page.add('button:has-text("Confirm")')
    page.add(".confirmation")
    page.add(".confirmation-number", text="  ABC123456  ")
    page.add(".movie-title", text="Dune: Part Two")
    page.add(".theater-name", text="AMC Century City 15")
    page.add(".showtime", text="7:00 PM")
    page.add(".total-price", text="$31.98")


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def context(page: FakePage) -> FakeContext:
    return FakeContext(page)


@pytest.fixture
def browser(context: FakeContext) -> FakeBrowserManager:
    return FakeBrowserManager(context)


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def driver(browser: FakeBrowserManager, sessions: SessionStore) -> BookingDriver:
    return BookingDriver(
        browser=browser,
        sessions=sessions,
        site_url="https://www.amctheatres.com/",
        login_timeout_ms=100,
        seat_map_timeout_ms=100,
        confirmation_timeout_ms=100,
    )


@pytest.fixture
def lay_out(page: FakePage) -> Callable[..., FakePage]:
    """Fill the page with everything a successful booking needs."""

    def build(seats: int = 4) -> FakePage:
        _lay_out_happy_path(page, seats)
        return page

    return build
