"""
Cursor based pagination.

Vendors page directory listings with an opaque marker (``next_marker``,
``offset``, ``last_file_id``...). PagedIterator keeps that marker as
explicit state so a listing can be consumed lazily and restarted later
from ``cursor``.
"""
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

T = TypeVar('T')


@dataclass
class Page(Generic[T]):
    """One page of results plus the cursor of the following page."""
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None

    @property
    def is_last(self) -> bool:
        return not self.next_cursor


class PagedIterator(Generic[T]):
    """
    Lazy async iterator over a paged listing.

    Example:
        >>> listing = provider.list_directory(folder)
        >>> async for item in listing:
        ...     print(item.name)
        >>> # resume later from a saved position
        >>> listing = provider.list_directory(folder, cursor=saved_cursor)
    """

    def __init__(
        self,
        fetch_page: Callable[[Optional[str]], Awaitable[Page[T]]],
        cursor: Optional[str] = None
    ):
        """
        Initialize the iterator.

        Args:
            fetch_page: Coroutine function returning the page at a cursor
                        (None for the first page)
            cursor: Cursor to start from
        """
        self._fetch_page = fetch_page
        self._cursor = cursor
        self._buffer: List[T] = []
        self._exhausted = False
        self._pages_fetched = 0

    @property
    def cursor(self) -> Optional[str]:
        """Cursor of the next page to fetch (None once exhausted)."""
        return None if self._exhausted else self._cursor

    @property
    def exhausted(self) -> bool:
        return self._exhausted and not self._buffer

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    async def next_page(self) -> List[T]:
        """
        Fetch the next page directly, bypassing item iteration.

        Returns:
            Items of the page, empty list when the listing is exhausted
        """
        if self._exhausted:
            return []
        page = await self._fetch_page(self._cursor)
        self._pages_fetched += 1
        self._cursor = page.next_cursor
        if page.is_last:
            self._exhausted = True
        return list(page.items)

    def __aiter__(self) -> 'PagedIterator[T]':
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._exhausted:
                raise StopAsyncIteration
            self._buffer = await self.next_page()
        return self._buffer.pop(0)

    async def collect(self) -> List[T]:
        """Drain the remaining items into a list."""
        return [item async for item in self]
