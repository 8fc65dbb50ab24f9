import unittest

import syncqueue


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(syncqueue, "SyncQueueManager"))
        self.assertTrue(hasattr(syncqueue, "RetryPolicy"))
        self.assertTrue(hasattr(syncqueue, "QueuedOperation"))
        self.assertTrue(hasattr(syncqueue, "OperationKind"))
        self.assertTrue(hasattr(syncqueue, "SyncStatus"))

        self.assertTrue(hasattr(syncqueue, "TemporaryId"))
        self.assertTrue(hasattr(syncqueue, "PermanentId"))
        self.assertTrue(hasattr(syncqueue, "TimeEntriesTransport"))
        self.assertTrue(hasattr(syncqueue, "build_operation"))

        self.assertTrue(hasattr(syncqueue, "SyncQueueError"))
        self.assertTrue(hasattr(syncqueue, "FlushInProgressError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(syncqueue, "__all__"))
        self.assertIn("SyncQueueManager", syncqueue.__all__)
        self.assertIn("SyncQueueError", syncqueue.__all__)
        for name in syncqueue.__all__:
            self.assertTrue(hasattr(syncqueue, name), name)


if __name__ == "__main__":
    unittest.main()
