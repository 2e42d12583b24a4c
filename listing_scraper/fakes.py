"""
In-memory stand-ins for the parts of Playwright's async API the scraper uses.

Only used by the test modules. Elements form a tree keyed by selector string:
a page or element's ``children`` maps the exact selector the scraper asks for
to the elements it should match.
"""
from typing import Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from .gallery import GRID_METRICS_JS, GRID_SCROLL_TO_JS


class FakeElement:
    def __init__(
        self,
        text: Optional[str] = None,
        attrs: Optional[Dict[str, Optional[str]]] = None,
        visible: bool = True,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        click_error: Optional[Exception] = None,
        on_click: Optional[Callable[[], None]] = None,
        attr_errors: Optional[set] = None,
    ):
        self.text = text
        self.attrs = attrs or {}
        self.visible = visible
        self.children = children or {}
        self.click_error = click_error
        self.on_click = on_click
        self.attr_errors = attr_errors or set()
        self.clicks = 0
        self.reads = 0

    def find(self, selector: str) -> List["FakeElement"]:
        return list(self.children.get(selector, []))

    def evaluate(self, expression, arg=None):
        raise PlaywrightError("evaluate is not supported on this element")


class FakeScrollGrid(FakeElement):
    """A scrollable container answering the gallery's in-page scroll helpers."""

    def __init__(self, height: int, client_height: int, **kwargs):
        super().__init__(**kwargs)
        self.height = height
        self.client_height = client_height
        self.top = 0
        self.scroll_targets: List[int] = []

    def evaluate(self, expression, arg=None):
        if expression == GRID_METRICS_JS:
            return {"top": self.top, "height": self.height, "step": self.client_height}
        if expression == GRID_SCROLL_TO_JS:
            prev = self.top
            self.scroll_targets.append(arg)
            self.top = max(0, min(arg, self.height - self.client_height))
            return prev
        raise PlaywrightError(f"Unexpected expression: {expression}")


class FakeLocator:
    def __init__(self, elements: List[FakeElement]):
        self._elements = list(elements)

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._elements[:1])

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self._elements[index:index + 1])

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator([child for el in self._elements for child in el.find(selector)])

    def _one(self) -> FakeElement:
        if not self._elements:
            raise PlaywrightTimeout("Timeout exceeded waiting for locator")
        return self._elements[0]

    async def count(self) -> int:
        return len(self._elements)

    async def all(self) -> List["FakeLocator"]:
        return [FakeLocator([el]) for el in self._elements]

    async def text_content(self, timeout=None) -> Optional[str]:
        el = self._one()
        el.reads += 1
        return el.text

    async def get_attribute(self, name: str, timeout=None) -> Optional[str]:
        el = self._one()
        el.reads += 1
        if name in el.attr_errors:
            raise PlaywrightTimeout(f"Timeout reading attribute {name}")
        return el.attrs.get(name)

    async def is_visible(self) -> bool:
        return bool(self._elements) and self._elements[0].visible

    async def click(self, timeout=None) -> None:
        el = self._one()
        if el.click_error:
            raise el.click_error
        el.clicks += 1
        if el.on_click:
            el.on_click()

    async def wait_for(self, state: str = "visible", timeout=None) -> None:
        if not self._elements or not self._elements[0].visible:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {state}")

    async def evaluate(self, expression, arg=None):
        return self._one().evaluate(expression, arg)


class FakePage:
    def __init__(
        self,
        children: Optional[Dict[str, List[FakeElement]]] = None,
        network_idle: bool = True,
        goto_error: Optional[Exception] = None,
    ):
        self.root = FakeElement(children=children)
        self.network_idle = network_idle
        self.goto_error = goto_error
        self.visited: List[str] = []

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self.root.find(selector))

    async def goto(self, url: str, wait_until=None, timeout=None) -> None:
        if self.goto_error:
            raise self.goto_error
        self.visited.append(url)

    async def wait_for_load_state(self, state: str = "load", timeout=None) -> None:
        if not self.network_idle:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {state}")


class FakeBrowser:
    def __init__(self, page: FakePage):
        self.page = page
        self.closed = False

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.closed = True


class FakePlaywright:
    """Replacement for ``async_playwright()``; launching returns ``browser``."""

    def __init__(self, browser: FakeBrowser, launch_error: Optional[Exception] = None):
        self.browser = browser
        self.launch_error = launch_error
        self.chromium = self
        self.launch_kwargs: Dict[str, object] = {}

    async def launch(self, **kwargs) -> FakeBrowser:
        self.launch_kwargs = kwargs
        if self.launch_error:
            raise self.launch_error
        return self.browser

    async def __aenter__(self) -> "FakePlaywright":
        return self

    async def __aexit__(self, *exc) -> bool:
        return False
