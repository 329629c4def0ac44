# tests/test_pagination.py
import pytest

from room_relay.core.errors import PaginationLimitExceeded, UpstreamError
from room_relay.services.pagination import CursorPaginator


class PagedSessionsApi:
    """
    Serves pre-built pages; page N advertises cursor "cursor-N".
    """

    def __init__(self, pages, fail_on_call=None):
        self.pages = pages
        self.fail_on_call = fail_on_call
        self.requests = []

    async def get_json(self, path, params=None):
        self.requests.append(dict(params or {}))
        index = len(self.requests) - 1
        if self.fail_on_call is not None and index == self.fail_on_call:
            raise UpstreamError("boom", status_code=503, body={"message": "unavailable"})
        page = self.pages[index]
        return {"limit": 20, "data": page, "last": f"cursor-{index + 1}"}


def _page(start: int, size: int):
    return [{"id": f"session-{i}"} for i in range(start, start + size)]


@pytest.mark.asyncio
async def test_full_pages_followed_by_short_page():
    """
    k full pages plus one short page => k+1 requests and a flat result.
    """
    pages = [_page(0, 20), _page(20, 20), _page(40, 20), _page(60, 7)]
    api = PagedSessionsApi(pages)

    result = await CursorPaginator(api, "/sessions").fetch_all({"room_id": "room-1"})

    assert len(api.requests) == 4
    assert len(result) == 3 * 20 + 7
    assert [item["id"] for item in result] == [f"session-{i}" for i in range(67)]


@pytest.mark.asyncio
async def test_cursor_is_sent_as_start_from_second_page():
    api = PagedSessionsApi([_page(0, 20), _page(20, 3)])

    await CursorPaginator(api, "/sessions").fetch_all({"room_id": "room-1"})

    assert api.requests[0] == {"room_id": "room-1", "limit": 20}
    assert api.requests[1] == {"room_id": "room-1", "limit": 20, "start": "cursor-1"}


@pytest.mark.asyncio
async def test_empty_first_page_returns_empty_list():
    api = PagedSessionsApi([[]])

    result = await CursorPaginator(api, "/sessions").fetch_all({"room_id": "room-1"})

    assert result == []
    assert len(api.requests) == 1


@pytest.mark.asyncio
async def test_exactly_full_last_page_needs_one_more_empty_request():
    api = PagedSessionsApi([_page(0, 20), []])

    result = await CursorPaginator(api, "/sessions").fetch_all({})

    assert len(result) == 20
    assert len(api.requests) == 2


@pytest.mark.asyncio
async def test_full_page_without_cursor_ends_the_walk():
    class NoCursorApi:
        def __init__(self):
            self.calls = 0

        async def get_json(self, path, params=None):
            self.calls += 1
            return {"limit": 20, "data": _page(0, 20)}

    api = NoCursorApi()

    result = await CursorPaginator(api, "/sessions").fetch_all({})

    assert len(result) == 20
    assert api.calls == 1


@pytest.mark.asyncio
async def test_failure_after_successful_pages_propagates():
    api = PagedSessionsApi([_page(0, 20), _page(20, 20), _page(40, 5)], fail_on_call=2)

    with pytest.raises(UpstreamError) as exc_info:
        await CursorPaginator(api, "/sessions").fetch_all({})

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_never_ending_upstream_hits_page_bound():
    class EndlessApi:
        def __init__(self):
            self.calls = 0

        async def get_json(self, path, params=None):
            self.calls += 1
            return {"data": _page(0, 20), "last": f"cursor-{self.calls}"}

    api = EndlessApi()

    with pytest.raises(PaginationLimitExceeded):
        await CursorPaginator(api, "/sessions", max_pages=5).fetch_all({})

    assert api.calls == 6


@pytest.mark.asyncio
async def test_listing_of_exactly_max_pages_completes():
    """
    max_pages full pages followed by an empty page is a complete listing,
    not a runaway upstream.
    """
    api = PagedSessionsApi([_page(0, 20), _page(20, 20), _page(40, 20), []])

    result = await CursorPaginator(api, "/sessions", max_pages=3).fetch_all({})

    assert len(result) == 60
    assert len(api.requests) == 4


@pytest.mark.asyncio
async def test_short_page_right_after_the_bound_completes():
    api = PagedSessionsApi([_page(0, 20), _page(20, 20), _page(40, 2)])

    result = await CursorPaginator(api, "/sessions", max_pages=2).fetch_all({})

    assert len(result) == 42
