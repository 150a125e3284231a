"""Tests for cursor pagination."""
import pytest

from cloudkit.core.pagination import Page, PagedIterator


def make_fetcher(pages):
    """Serve ``pages`` keyed by cursor and record the cursors requested."""
    requested = []

    async def fetch(cursor):
        requested.append(cursor)
        return pages[cursor]

    return fetch, requested


PAGES = {
    None: Page(items=[1, 2], next_cursor='m1'),
    'm1': Page(items=[3], next_cursor='m2'),
    'm2': Page(items=[4, 5], next_cursor=None),
}


class TestPage:
    """Test suite for Page."""

    def test_is_last(self):
        """Test a page without next cursor is the last one."""
        assert Page(items=[1]).is_last
        assert Page(items=[1], next_cursor='').is_last
        assert not Page(items=[1], next_cursor='x').is_last


class TestPagedIterator:
    """Test suite for PagedIterator."""

    @pytest.mark.asyncio
    async def test_iterates_all_pages(self):
        """Test items of every page are yielded in order."""
        fetch, requested = make_fetcher(PAGES)

        items = await PagedIterator(fetch).collect()

        assert items == [1, 2, 3, 4, 5]
        assert requested == [None, 'm1', 'm2']

    @pytest.mark.asyncio
    async def test_lazy(self):
        """Test pages are only fetched when needed."""
        fetch, requested = make_fetcher(PAGES)
        iterator = PagedIterator(fetch)

        assert requested == []
        assert await iterator.__anext__() == 1
        assert await iterator.__anext__() == 2
        assert requested == [None]

    @pytest.mark.asyncio
    async def test_next_page_and_cursor(self):
        """Test page-wise consumption exposes the resume cursor."""
        fetch, requested = make_fetcher(PAGES)
        iterator = PagedIterator(fetch)

        assert await iterator.next_page() == [1, 2]
        assert iterator.cursor == 'm1'
        assert iterator.pages_fetched == 1

        assert await iterator.next_page() == [3]
        assert await iterator.next_page() == [4, 5]
        assert iterator.cursor is None
        assert iterator.exhausted
        assert await iterator.next_page() == []
        assert iterator.pages_fetched == 3

    @pytest.mark.asyncio
    async def test_resume_from_cursor(self):
        """Test a new iterator restarts from a saved cursor."""
        fetch, requested = make_fetcher(PAGES)

        items = await PagedIterator(fetch, cursor='m1').collect()

        assert items == [3, 4, 5]
        assert requested == ['m1', 'm2']

    @pytest.mark.asyncio
    async def test_empty_listing(self):
        """Test a single empty page ends iteration."""
        fetch, requested = make_fetcher({None: Page(items=[])})

        assert await PagedIterator(fetch).collect() == []

    @pytest.mark.asyncio
    async def test_skips_empty_middle_page(self):
        """Test an empty page with a next cursor does not end iteration."""
        fetch, _ = make_fetcher({
            None: Page(items=[], next_cursor='a'),
            'a': Page(items=['x'], next_cursor=None),
        })

        assert await PagedIterator(fetch).collect() == ['x']
