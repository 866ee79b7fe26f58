import asyncio
from datetime import timedelta

from notifyhub.application import NotificationCenter
from notifyhub.application.use_cases.notifications import NOT_FOUND_ERROR
from notifyhub.config import Settings

from conftest import build_notification


def _ids(center):
    return [item.id for item in center.notifications]


def _by_id(center, notification_id):
    for item in center.notifications:
        if item.id == notification_id:
            return item
    raise AssertionError(f"{notification_id} not in collection")


async def _loaded_center(store, **kwargs):
    center = NotificationCenter(store, **kwargs)
    await center.fetch_notifications()
    return center


def test_mark_as_read_updates_record_and_unread_count(store):
    async def scenario():
        center = await _loaded_center(store)
        before = center.unread_count
        result = await center.mark_as_read("n5")
        return center, before, result

    center, before, result = asyncio.run(scenario())

    assert result.success is True
    assert result.error is None
    assert center.unread_count == before - 1
    assert _by_id(center, "n5").is_read is True
    assert _by_id(center, "n5").read_at is not None
    assert store.get("n5").is_read is True


def test_failed_mark_as_read_rolls_back(store):
    store.fail_read_ids.add("n5")

    async def scenario():
        center = await _loaded_center(store)
        before = center.unread_count
        result = await center.mark_as_read("n5")
        return center, before, result

    center, before, result = asyncio.run(scenario())

    assert result.success is False
    assert "mark read rejected" in result.error
    assert center.unread_count == before
    assert _by_id(center, "n5").is_read is False
    assert _by_id(center, "n5").read_at is None


def test_optimistic_read_is_visible_while_request_is_pending(store):
    async def scenario():
        center = await _loaded_center(store)
        store.read_gate = asyncio.Event()
        task = asyncio.create_task(center.mark_as_read("n5"))
        await asyncio.sleep(0)
        during = _by_id(center, "n5").is_read
        store.read_gate.set()
        await task
        return during

    assert asyncio.run(scenario()) is True


def test_mark_as_read_twice_sends_one_request(store):
    async def scenario():
        center = await _loaded_center(store)
        first = await center.mark_as_read("n5")
        second = await center.mark_as_read("n5")
        return first, second

    first, second = asyncio.run(scenario())

    assert first.success and second.success
    assert store.read_calls == ["n5"]


def test_concurrent_mark_as_read_on_same_id_is_serialized(store):
    async def scenario():
        center = await _loaded_center(store)
        store.read_gate = asyncio.Event()
        first = asyncio.create_task(center.mark_as_read("n5"))
        second = asyncio.create_task(center.mark_as_read("n5"))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        store.read_gate.set()
        return await asyncio.gather(first, second)

    results = asyncio.run(scenario())

    assert all(result.success for result in results)
    assert store.read_calls == ["n5"]


def test_mutations_on_distinct_ids_run_concurrently(store):
    async def scenario():
        center = await _loaded_center(store)
        store.read_gate = asyncio.Event()
        first = asyncio.create_task(center.mark_as_read("n5"))
        second = asyncio.create_task(center.mark_as_read("n3"))
        await asyncio.sleep(0)
        in_flight = list(store.read_calls)
        store.read_gate.set()
        await asyncio.gather(first, second)
        return in_flight

    assert asyncio.run(scenario()) == ["n5", "n3"]


def test_mark_as_read_unknown_id_fails_without_remote_call(store):
    async def scenario():
        center = await _loaded_center(store)
        return await center.mark_as_read("missing")

    result = asyncio.run(scenario())

    assert result.success is False
    assert result.error == NOT_FOUND_ERROR
    assert store.read_calls == []


def test_refresh_does_not_revert_a_local_read(store):
    store.reflect_reads = False

    async def scenario():
        center = await _loaded_center(store)
        store.read_gate = asyncio.Event()
        task = asyncio.create_task(center.mark_as_read("n5"))
        await asyncio.sleep(0)
        await center.refresh()
        during = _by_id(center, "n5").is_read
        store.read_gate.set()
        await task
        await center.refresh()
        return during, _by_id(center, "n5").is_read

    during, after = asyncio.run(scenario())

    assert during is True
    assert after is True


def test_mark_all_as_read_marks_every_unread_record(store):
    async def scenario():
        center = await _loaded_center(store)
        result = await center.mark_all_as_read()
        return center, result

    center, result = asyncio.run(scenario())

    assert result.success is True
    assert result.error is None
    assert set(result.succeeded) == {"n5", "n3", "n2", "n1"}
    assert center.unread_count == 0
    assert store.mark_all_calls == [["n5", "n3", "n2", "n1"]]


def test_mark_all_as_read_rolls_back_only_rejected_ids(store):
    store.reject_ids.add("n3")

    async def scenario():
        center = await _loaded_center(store)
        result = await center.mark_all_as_read()
        return center, result

    center, result = asyncio.run(scenario())

    assert result.success is False
    assert result.failed == ("n3",)
    assert result.error == "1 notification(s) could not be marked as read"
    assert center.unread_count == 1
    assert _by_id(center, "n3").is_read is False
    assert _by_id(center, "n5").is_read is True


def test_mark_all_as_read_failure_restores_every_record(store):
    store.fail_mark_all = True

    async def scenario():
        center = await _loaded_center(store)
        before = [(item.id, item.is_read) for item in center.notifications]
        result = await center.mark_all_as_read()
        after = [(item.id, item.is_read) for item in center.notifications]
        return before, after, result

    before, after, result = asyncio.run(scenario())

    assert before == after
    assert set(result.failed) == {"n5", "n3", "n2", "n1"}
    assert "mark all rejected" in result.error


def test_mark_all_as_read_without_unread_records_is_a_noop(empty_store):
    empty_store.notifications = [build_notification("a", is_read=True)]

    async def scenario():
        center = await _loaded_center(empty_store)
        return await center.mark_all_as_read()

    result = asyncio.run(scenario())

    assert result.success is True
    assert result.succeeded == ()
    assert empty_store.mark_all_calls == []


def test_delete_removes_record_and_decrements_total(store):
    async def scenario():
        center = await _loaded_center(store)
        result = await center.delete_notification("n3")
        return center, result

    center, result = asyncio.run(scenario())

    assert result.success is True
    assert _ids(center) == ["n5", "n4", "n2", "n1"]
    assert center.pagination.total == 4


def test_failed_delete_restores_original_position(store):
    store.fail_delete_ids.add("n3")

    async def scenario():
        center = await _loaded_center(store)
        result = await center.delete_notification("n3")
        return center, result

    center, result = asyncio.run(scenario())

    assert result.success is False
    assert _ids(center) == ["n5", "n4", "n3", "n2", "n1"]
    assert center.pagination.total == 5


def test_failed_delete_restores_by_creation_time_after_concurrent_refresh(store):
    store.fail_delete_ids.add("n3")

    async def scenario():
        center = await _loaded_center(store)
        store.delete_gate = asyncio.Event()
        task = asyncio.create_task(center.delete_notification("n3"))
        await asyncio.sleep(0)
        during = _ids(center)
        store.publish(build_notification("n6", minutes_ago=0))
        await center.refresh()
        store.delete_gate.set()
        await task
        return center, during

    center, during = asyncio.run(scenario())

    assert during == ["n5", "n4", "n2", "n1"]
    assert _ids(center) == ["n6", "n5", "n4", "n3", "n2", "n1"]


def test_pending_delete_is_not_resurrected_by_refresh(store):
    async def scenario():
        center = await _loaded_center(store)
        store.delete_gate = asyncio.Event()
        task = asyncio.create_task(center.delete_notification("n4"))
        await asyncio.sleep(0)
        await center.refresh()
        during = _ids(center)
        store.delete_gate.set()
        await task
        await center.refresh()
        return during, _ids(center)

    during, after = asyncio.run(scenario())

    assert "n4" not in during
    assert "n4" not in after


def test_delete_unknown_id_fails(store):
    async def scenario():
        center = await _loaded_center(store)
        return await center.delete_notification("missing")

    result = asyncio.run(scenario())

    assert result.success is False
    assert result.error == NOT_FOUND_ERROR
    assert store.delete_calls == []


def test_rollback_is_skipped_after_close(store):
    store.fail_read_ids.add("n5")
    notified = []

    async def scenario():
        center = await _loaded_center(store)
        center.subscribe(lambda state: notified.append(state))
        store.read_gate = asyncio.Event()
        task = asyncio.create_task(center.mark_as_read("n5"))
        await asyncio.sleep(0)
        count = len(notified)
        center.close()
        store.read_gate.set()
        result = await task
        return count, result

    count, result = asyncio.run(scenario())

    assert result.success is False
    assert len(notified) == count


def test_read_timestamp_uses_the_timezone_of_the_given_settings(store):
    settings = Settings(remote_api_url="http://store.test/api", app_timezone="UTC+02:00")

    async def scenario():
        center = NotificationCenter.from_settings(store, settings)
        await center.fetch_notifications()
        await center.mark_as_read("n5")
        return _by_id(center, "n5").read_at

    read_at = asyncio.run(scenario())

    assert read_at.utcoffset() == timedelta(hours=2)
