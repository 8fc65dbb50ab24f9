import unittest
from datetime import datetime, timezone

import httpx

from syncqueue.manager import SyncQueueManager
from syncqueue.ops import OperationKind, SyncStatus
from syncqueue.transport import (
    DeleteEntryCommand,
    StopEntryCommand,
    TimeEntriesTransport,
    TransportConfig,
    UpdateEntryCommand,
    build_operation,
)
from syncqueue.util.ids import TemporaryId


class FakeTransport:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    async def update_entry(self, entry_id: int, fields: dict) -> dict:
        self.calls.append(("update", entry_id, fields))
        return {}

    async def stop_entry(self, entry_id: int, stop: datetime) -> dict:
        self.calls.append(("stop", entry_id, stop))
        return {}

    async def delete_entry(self, entry_id: int) -> None:
        self.calls.append(("delete", entry_id))


async def no_sleep(delay: float) -> None:
    return None


class TestBuildOperation(unittest.TestCase):
    def test_update_kinds_use_update_command(self) -> None:
        transport = FakeTransport()
        op = build_operation(-1, OperationKind.UPDATE_BULK, {"description": "a", "local_only": 1}, transport)

        self.assertEqual(op.key, TemporaryId(-1))
        self.assertIsInstance(op.executor, UpdateEntryCommand)
        self.assertEqual(op.executor.fields, {"description": "a"})
        self.assertEqual(op.payload, {"description": "a", "local_only": 1})

    def test_stop_and_delete(self) -> None:
        transport = FakeTransport()
        stop_at = datetime(2025, 1, 1, tzinfo=timezone.utc)

        stop = build_operation(-1, OperationKind.STOP, {"stop": stop_at}, transport)
        delete = build_operation(-1, OperationKind.DELETE, {}, transport)

        self.assertIsInstance(stop.executor, StopEntryCommand)
        self.assertIsInstance(delete.executor, DeleteEntryCommand)

    def test_aliased_project_field_is_sent_as_project_name(self) -> None:
        transport = FakeTransport()
        op = build_operation(-100, OperationKind.UPDATE_PROJECT, {"projectName": "Work"}, transport)

        self.assertEqual(op.executor.fields, {"project_name": "Work"})
        self.assertEqual(op.payload, {"projectName": "Work"})

    def test_canonical_field_wins_over_alias(self) -> None:
        transport = FakeTransport()
        payload = {"projectName": "Alias", "project_name": "Canonical", "tagNames": ["t"]}
        op = build_operation(-1, OperationKind.UPDATE_BULK, payload, transport)

        self.assertEqual(op.executor.fields, {"project_name": "Canonical", "tags": ["t"]})

    def test_invalid_payloads(self) -> None:
        transport = FakeTransport()
        with self.assertRaises(ValueError):
            build_operation(-1, OperationKind.STOP, {"stop": "not a datetime"}, transport)
        with self.assertRaises(ValueError):
            build_operation(-1, OperationKind.UPDATE_TAGS, {}, transport)


class TestCommandsThroughManager(unittest.IsolatedAsyncioTestCase):
    async def test_folded_fields_reach_the_bulk_call(self) -> None:
        transport = FakeTransport()
        mgr = SyncQueueManager(sleep=no_sleep)

        mgr.enqueue(build_operation(-1, OperationKind.UPDATE_BULK, {"description": "a"}, transport))
        mgr.enqueue(build_operation(-1, OperationKind.UPDATE_PROJECT, {"project_name": "Work"}, transport))
        mgr.enqueue(build_operation(-1, OperationKind.UPDATE_BULK, {"tags": ["deep"]}, transport))
        mgr.enqueue(build_operation(-1, OperationKind.DELETE, {}, transport))
        mgr.reconcile(-1, 12)

        results = await mgr.flush(-1, 12)

        self.assertTrue(all(r.success for r in results))
        self.assertEqual(
            transport.calls,
            [
                ("update", 12, {"description": "a", "project_name": "Work", "tags": ["deep"]}),
                ("delete", 12),
            ],
        )

    async def test_http_failures_are_retried_then_reported(self) -> None:
        attempts = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request.url.path)
            if request.method == "DELETE":
                return httpx.Response(503, json={"error": "unavailable"})
            return httpx.Response(200, json={"id": 12})

        config = TransportConfig(base_url="https://tracker.example.com", session_token="tok")
        client = httpx.AsyncClient(base_url=config.base_url, transport=httpx.MockTransport(handler))
        transport = TimeEntriesTransport.from_client(client, config)
        mgr = SyncQueueManager(sleep=no_sleep)

        mgr.enqueue(build_operation(-1, OperationKind.UPDATE_DESCRIPTION, {"description": "a"}, transport))
        mgr.enqueue(build_operation(-1, OperationKind.DELETE, {}, transport))
        mgr.reconcile(-1, 12)

        async with transport:
            results = await mgr.flush(-1, 12)

        self.assertEqual([r.status for r in results], ["success", "failed"])
        self.assertEqual(results[1].error_type, "ApiError")
        self.assertEqual(results[1].error_details["status_code"], 503)
        self.assertEqual(len(attempts), 1 + 4)
        self.assertEqual(mgr.get_sync_status(-1), SyncStatus.ERROR)
        self.assertEqual([op.kind for op in mgr.pending_operations(12)], [OperationKind.DELETE])

    async def test_update_command_sends_copy_of_fields(self) -> None:
        transport = FakeTransport()
        command = UpdateEntryCommand(transport, {"description": "a"})

        await command(4)
        rebound = command.with_payload({"description": "b", "unknown": 1})
        await rebound(4)

        self.assertEqual(transport.calls, [("update", 4, {"description": "a"}), ("update", 4, {"description": "b"})])
        self.assertEqual(command.fields, {"description": "a"})


if __name__ == "__main__":
    unittest.main()
