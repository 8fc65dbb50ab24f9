import unittest

from syncqueue.ops import SyncStatus, SyncStatusTracker
from syncqueue.util.ids import PermanentId, TemporaryId


class TestSyncStatusTracker(unittest.TestCase):
    def test_default_is_synced(self) -> None:
        t = SyncStatusTracker()
        self.assertIsNone(t.get(PermanentId(1)))
        self.assertEqual(t.status_of(PermanentId(1)), SyncStatus.SYNCED)

    def test_set_and_discard(self) -> None:
        t = SyncStatusTracker()
        t.set(PermanentId(1), SyncStatus.ERROR)
        self.assertEqual(t.status_of(PermanentId(1)), SyncStatus.ERROR)
        t.discard(PermanentId(1))
        t.discard(PermanentId(1))
        self.assertEqual(len(t), 0)

    def test_migrate_pending_becomes_syncing(self) -> None:
        t = SyncStatusTracker()
        t.set(TemporaryId(-1), SyncStatus.PENDING)

        self.assertEqual(t.migrate(TemporaryId(-1), PermanentId(5)), SyncStatus.SYNCING)
        self.assertIsNone(t.get(TemporaryId(-1)))
        self.assertEqual(t.get(PermanentId(5)), SyncStatus.SYNCING)

    def test_migrate_missing_starts_syncing(self) -> None:
        t = SyncStatusTracker()
        self.assertEqual(t.migrate(TemporaryId(-1), PermanentId(5)), SyncStatus.SYNCING)

    def test_migrate_keeps_other_statuses(self) -> None:
        t = SyncStatusTracker()
        t.set(TemporaryId(-1), SyncStatus.ERROR)
        self.assertEqual(t.migrate(TemporaryId(-1), PermanentId(5)), SyncStatus.ERROR)

    def test_status_values(self) -> None:
        self.assertEqual(
            [s.value for s in SyncStatus],
            ["pending", "syncing", "synced", "error"],
        )


if __name__ == "__main__":
    unittest.main()
