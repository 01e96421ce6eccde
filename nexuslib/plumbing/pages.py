"""
Traversal of listings split into pages by continuation tokens.

Listing endpoints return `{"items": [...], "continuationToken": "..."}`, where the token is passed
back to fetch the next page, and is missing on the last one.  An empty page with a token is not the
end, nor is a full page without one anything but the end.
"""

from typing import Any, Callable, Generic, Iterator, List, NamedTuple, Optional, TypeVar

from .common import ProtocolError


T = TypeVar("T")


class PageRequest(NamedTuple):
    """
    Parameters of a single page fetch: the owning object of the collection (typically a repository
    name), and the token of the page to fetch (`None` for the first page).
    """

    scope: str
    token: Optional[str] = None


class Page(Generic[T]):
    """
    Items in a single page of a listing, and the token of the next page if there is one.
    """

    def __init__(self, items: List[T], token: Optional[str] = None):
        self.items = items
        self.token = token

    @property
    def last(self) -> bool:
        return self.token is None

    def __repr__(self):
        return "<{}: {} items, token {!r}>".format(self.__class__.__name__, len(self.items),
                                                  self.token)


FetchPage = Callable[[PageRequest], Page[Any]]
"""
Callback to retrieve the page for a given request.
"""

HandlePage = Callable[[Page[Any], bool], bool]
"""
Callback to consume a page, given the page and whether it's the last.  Returns `True` to fetch the
next page.
"""


def parse_page(data: Any, item: Callable[[Any], T]) -> Page[T]:
    """
    Decode a listing response body, converting each item with the given callable.
    """
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise ProtocolError("Malformed page: {!r}".format(data))
    token = data.get("continuationToken")
    if token is not None and not isinstance(token, str):
        raise ProtocolError("Malformed continuation token: {!r}".format(token))
    return Page([item(value) for value in data["items"]], token)


def traverse(request: PageRequest, fetch_page: FetchPage, handle_page: HandlePage) -> None:
    """
    Fetch pages in order, passing each to `handle_page` until a page without a token is reached.

    The handler's return value for the last page is ignored, as there's nothing left to fetch.  On
    earlier pages, returning a falsy value stops the traversal.  Any exception raised by either
    callback stops the traversal and is propagated.
    """
    while True:
        page = fetch_page(request)
        if page.token is None:
            handle_page(page, True)
            return
        if not handle_page(page, False):
            return
        request = request._replace(token=page.token)


def iter_pages(request: PageRequest, fetch_page: FetchPage) -> Iterator[Page[Any]]:
    """
    Generator form of `traverse`: pages are only fetched as the iterator is advanced, so breaking
    out of a loop stops any further requests.
    """
    while True:
        page = fetch_page(request)
        yield page
        if page.token is None:
            return
        request = request._replace(token=page.token)


def collect_items(request: PageRequest, fetch_page: FetchPage) -> List[Any]:
    """
    Fetch every page of a listing, and return all items in the order received.
    """
    items: List[Any] = []

    def handle(page: Page[Any], last: bool) -> bool:
        items.extend(page.items)
        return True

    traverse(request, fetch_page, handle)
    return items
