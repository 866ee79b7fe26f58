import asyncio

import pytest

from notifyhub.application import NotificationCenter
from notifyhub.application.use_cases.notifications import merge_notifications

from conftest import FakeNotificationStore, build_notification


def _ids(center):
    return [item.id for item in center.notifications]


def test_merge_refreshes_known_ids_in_place_and_prepends_new_ones():
    current = [
        build_notification("b", minutes_ago=2),
        build_notification("a", minutes_ago=3),
    ]
    incoming = [
        build_notification("c", minutes_ago=1),
        build_notification("b", minutes_ago=2, title="Updated"),
    ]

    merged = merge_notifications(current, incoming, prepend_new=True)

    assert [item.id for item in merged] == ["c", "b", "a"]
    assert merged[1].title == "Updated"


def test_merge_appends_new_ids_for_later_pages():
    current = [build_notification("b"), build_notification("a")]
    incoming = [build_notification("z"), build_notification("a")]

    merged = merge_notifications(current, incoming, prepend_new=False)

    assert [item.id for item in merged] == ["b", "a", "z"]


def test_merge_keeps_locally_read_flag_and_skips_excluded_ids():
    current = [build_notification("a", is_read=True)]
    incoming = [build_notification("a"), build_notification("gone")]

    merged = merge_notifications(
        current, incoming, prepend_new=True, locally_read={"a"}, excluded={"gone"}
    )

    assert [item.id for item in merged] == ["a"]
    assert merged[0].is_read is True


def test_merge_collapses_duplicates_within_one_page():
    incoming = [build_notification("a", title="first"), build_notification("a", title="second")]

    merged = merge_notifications([], incoming, prepend_new=True)

    assert len(merged) == 1
    assert merged[0].title == "second"


def test_fetch_first_page_populates_collection_and_pagination(store):
    async def scenario():
        center = NotificationCenter(store, page_limit=2)
        page = await center.fetch_notifications()
        return center, page

    center, page = asyncio.run(scenario())

    assert page is not None
    assert _ids(center) == ["n5", "n4"]
    assert center.pagination.page == 1
    assert center.pagination.limit == 2
    assert center.pagination.total == 5
    assert center.pagination.can_load_more is True
    assert center.error is None
    assert center.loading is False


def test_fetching_the_same_page_twice_is_idempotent(store):
    async def scenario():
        center = NotificationCenter(store)
        await center.fetch_notifications()
        first = _ids(center)
        await center.fetch_notifications()
        return first, _ids(center)

    first, second = asyncio.run(scenario())

    assert first == second
    assert len(second) == len(set(second)) == 5


def test_load_more_appends_next_page_until_exhausted(store):
    async def scenario():
        center = NotificationCenter(store, page_limit=2)
        await center.fetch_notifications()
        await center.load_more()
        await center.load_more()
        last = await center.load_more()
        return center, last

    center, last = asyncio.run(scenario())

    assert _ids(center) == ["n5", "n4", "n3", "n2", "n1"]
    assert center.pagination.page == 3
    assert center.pagination.can_load_more is False
    assert last is None
    assert store.fetch_calls == [(1, 2), (2, 2), (3, 2)]


def test_refresh_after_load_more_does_not_rewind_pagination(store):
    async def scenario():
        center = NotificationCenter(store, page_limit=2)
        await center.fetch_notifications()
        await center.load_more()
        store.publish(build_notification("n6", minutes_ago=0, priority_score=0.5))
        await center.refresh()
        return center

    center = asyncio.run(scenario())

    assert _ids(center) == ["n6", "n5", "n4", "n3", "n2"]
    assert center.pagination.page == 2
    assert center.pagination.total == 6


def test_failed_fetch_keeps_previous_collection_and_sets_error(store):
    async def scenario():
        center = NotificationCenter(store)
        await center.fetch_notifications()
        store.fail_fetch = True
        result = await center.refresh()
        return center, result

    center, result = asyncio.run(scenario())

    assert result is None
    assert len(center.notifications) == 5
    assert center.error is not None
    assert "store unavailable" in center.error
    assert center.loading is False


def test_successful_fetch_clears_previous_error(store):
    async def scenario():
        center = NotificationCenter(store)
        store.fail_fetch = True
        await center.refresh()
        failed_error = center.error
        store.fail_fetch = False
        await center.refresh()
        return failed_error, center.error

    failed_error, error = asyncio.run(scenario())

    assert failed_error is not None
    assert error is None


@pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0), (1, 101), (-2, 5)])
def test_invalid_page_arguments_are_rejected(store, page, limit):
    async def scenario():
        center = NotificationCenter(store)
        await center.fetch_notifications(page, limit)

    with pytest.raises(ValueError):
        asyncio.run(scenario())
    assert store.fetch_calls == []


def test_concurrent_refreshes_share_one_request(store):
    async def scenario():
        store.fetch_gate = asyncio.Event()
        center = NotificationCenter(store)
        first = asyncio.create_task(center.refresh())
        second = asyncio.create_task(center.refresh())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        loading = center.loading
        calls = len(store.fetch_calls)
        store.fetch_gate.set()
        results = await asyncio.gather(first, second)
        return center, loading, calls, results

    center, loading, calls, results = asyncio.run(scenario())

    assert loading is True
    assert calls == 1
    assert results[0] is results[1]
    assert len(center.notifications) == 5


def test_response_after_close_is_discarded(store):
    async def scenario():
        store.fetch_gate = asyncio.Event()
        center = NotificationCenter(store)
        task = asyncio.create_task(center.fetch_notifications())
        await asyncio.sleep(0)
        center.close()
        store.fetch_gate.set()
        result = await task
        return center, result

    center, result = asyncio.run(scenario())

    assert result is None
    assert center.notifications == ()
    assert center.closed is True


def test_listeners_observe_loading_transitions(store):
    seen = []

    async def scenario():
        center = NotificationCenter(store)
        center.subscribe(lambda state: seen.append((state.loading, len(state.items))))
        await center.fetch_notifications()

    asyncio.run(scenario())

    assert seen[0] == (True, 0)
    assert seen[-1] == (False, 5)


def test_failing_listener_does_not_break_fetch(store):
    def broken(state):
        raise RuntimeError("listener exploded")

    async def scenario():
        center = NotificationCenter(store)
        center.subscribe(broken)
        await center.fetch_notifications()
        return center

    center = asyncio.run(scenario())

    assert len(center.notifications) == 5


def test_unsubscribed_listener_is_not_called(store):
    calls = []

    async def scenario():
        center = NotificationCenter(store)
        unsubscribe = center.subscribe(lambda state: calls.append(state))
        unsubscribe()
        await center.fetch_notifications()

    asyncio.run(scenario())

    assert calls == []


def test_changing_page_size_restarts_pagination_without_gaps():
    store = FakeNotificationStore(
        [build_notification(f"n{index:03d}", minutes_ago=index) for index in range(150)]
    )

    async def scenario():
        center = NotificationCenter(store)
        await center.fetch_notifications(1, 20)
        await center.load_more()
        await center.fetch_notifications(1, 50)
        resized = center.pagination
        while center.pagination.can_load_more:
            await center.load_more()
        return center, resized

    center, resized = asyncio.run(scenario())

    assert (resized.page, resized.limit) == (1, 50)
    assert _ids(center) == [f"n{index:03d}" for index in range(150)]
    assert store.fetch_calls == [(1, 20), (2, 20), (1, 50), (2, 50), (3, 50)]


def test_merge_places_new_ids_after_their_server_predecessor():
    current = [build_notification("a", minutes_ago=1), build_notification("b", minutes_ago=2)]
    incoming = [
        build_notification("new", minutes_ago=0),
        build_notification("a", minutes_ago=1),
        build_notification("b", minutes_ago=2),
        build_notification("c", minutes_ago=3),
    ]

    merged = merge_notifications(current, incoming, prepend_new=True)

    assert [item.id for item in merged] == ["new", "a", "b", "c"]
