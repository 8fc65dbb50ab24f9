"""SyncQueueManager: queues optimistic edits and replays them once ids are known."""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional

from syncqueue.errors import (
    FlushInProgressError,
    InvalidArgumentError,
    InvalidStateError,
)
from syncqueue.models import OperationResult, QueueDebugInfo
from syncqueue.ops import (
    SETTLED_STATUSES,
    IdentifierMap,
    OperationKind,
    QueuedOperation,
    RetryPolicy,
    SyncStatus,
    SyncStatusTracker,
    merge_operations,
)
from syncqueue.util.ids import EntryKey, PermanentId, TemporaryId, to_entry_key

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class SyncQueueManager:
    """
    Owns the pending operations, the identifier map and the sync statuses.

    Usage:
        1. enqueue() edits made while an entity only has a temporary id.
        2. reconcile(temp, permanent) once the remote create call returns.
        3. await flush(temp, permanent) to replay the edits in order.

    All mutating calls except flush/retry_failed_operations are synchronous,
    so they are atomic with respect to each other under asyncio. Only one
    flush may run per key at a time.
    """

    def __init__(
        self,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep: Sleep = sleep or asyncio.sleep

        self._queue: dict[EntryKey, list[QueuedOperation]] = {}
        self._id_map = IdentifierMap()
        self._statuses = SyncStatusTracker()

        self._in_flight: set[PermanentId] = set()
        self._tombstoned: set[EntryKey] = set()

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    # ----------------------------
    # Identifiers
    # ----------------------------
    def is_temp_id(self, key: EntryKey | int) -> bool:
        return isinstance(_coerce_key(key), TemporaryId)

    def get_permanent_id(self, temp_key: EntryKey | int) -> Optional[PermanentId]:
        """Return the permanent id a temporary id was reconciled to, if known."""
        key = _coerce_key(temp_key)
        if isinstance(key, PermanentId):
            return key
        return self._id_map.get(key)

    # ----------------------------
    # Mutations
    # ----------------------------
    def enqueue(self, operation: QueuedOperation) -> None:
        """
        Queue an operation under its entity's current key and merge it.

        The payload is opaque here; only the executor is checked.

        Raises:
            InvalidArgumentError: if the executor is not callable.
            InvalidStateError: if the entity has been tombstoned.
        """
        try:
            operation.validate_executor()
        except ValueError as exc:
            raise InvalidArgumentError(
                "Invalid operation: executor is not callable",
                details={"op_id": operation.op_id, "kind": operation.kind.value},
                cause=exc,
            ) from exc

        key = self._current_key(_coerce_key(operation.key))
        if key in self._tombstoned:
            raise InvalidStateError(
                "Cannot enqueue operations for a deleted entity",
                details={"key": str(key)},
            )

        if operation.key != key:
            operation = dataclasses.replace(operation, key=key)

        logger.debug("Queueing %s for %s", operation.kind.value, key)
        self._queue[key] = merge_operations(self._queue.get(key, []), operation)

        if key not in self._in_flight:
            self._statuses.set(key, SyncStatus.PENDING)

    def reconcile(self, temp_key: EntryKey | int, permanent_key: EntryKey | int) -> None:
        """
        Bind temp_key to permanent_key and move its queued state over.

        Does not execute anything; call flush() afterwards.

        Raises:
            InvalidArgumentError: if the keys are not temporary/permanent.
            InvalidStateError: if temp_key was already bound to another id.
        """
        temp = _require_temporary(temp_key)
        permanent = _require_permanent(permanent_key)

        if not self._id_map.bind(temp, permanent):
            logger.warning("%s is already reconciled to %s; ignoring", temp, permanent)
            return

        logger.info("Mapping %s -> %s", temp, permanent)

        queued = self._queue.pop(temp, None)
        if queued:
            logger.info("Moving %d queued operation(s) from %s to %s", len(queued), temp, permanent)
            for op in queued:
                op.key = permanent
            # Operations queued under the temporary id were issued first.
            self._queue[permanent] = queued + self._queue.get(permanent, [])

        if temp in self._tombstoned:
            self._tombstoned.discard(temp)
            self._tombstoned.add(permanent)

        self._statuses.migrate(temp, permanent)

    def tombstone(self, key: EntryKey | int) -> None:
        """
        Mark an entity as deleted.

        Queued updates that have not started are skipped by the running or
        next flush; a queued DELETE still runs. An executor that is already
        running finishes.
        """
        current = self._current_key(_coerce_key(key))
        self._tombstoned.add(current)
        logger.info("Tombstoned %s", current)

    def is_tombstoned(self, key: EntryKey | int) -> bool:
        return self._current_key(_coerce_key(key)) in self._tombstoned

    def clear_sync_status(self, key: EntryKey | int) -> None:
        """Forget a settled (synced/error) status so the entity reads as the default."""
        current = self._current_key(_coerce_key(key))
        status = self._statuses.get(current)
        if status is None:
            return
        if status not in SETTLED_STATUSES:
            raise InvalidStateError(
                "Only a settled sync status can be cleared",
                details={"key": str(current), "status": status.value},
            )
        self._statuses.discard(current)

    def clear(self) -> None:
        """
        Discard all queue, mapping, status and tombstone state (session reset).

        Raises:
            InvalidStateError: if a flush is in flight.
        """
        if self._in_flight:
            raise InvalidStateError(
                "Cannot clear while a flush is in flight",
                details={"keys": sorted(str(k) for k in self._in_flight)},
            )
        logger.debug("Clearing %d queued operation(s)", self.queue_size())
        self._queue.clear()
        self._id_map.clear()
        self._statuses.clear()
        self._tombstoned.clear()

    # ----------------------------
    # Execution
    # ----------------------------
    async def flush(
        self,
        temp_key: EntryKey | int,
        permanent_key: EntryKey | int,
    ) -> list[OperationResult]:
        """
        Execute the operations queued for an entity, strictly one at a time.

        Failed operations are retried with exponential backoff up to
        max_retries times. Failures are recorded per operation; later
        operations still run. Succeeded operations are dropped from the queue,
        failed ones stay for retry_failed_operations().

        Raises:
            InvalidArgumentError: if the keys are inconsistent.
            FlushInProgressError: if this entity is already being flushed.
        """
        temp = _coerce_key(temp_key)
        permanent = _require_permanent(permanent_key)

        if isinstance(temp, TemporaryId):
            mapped = self._id_map.get(temp)
            if mapped is not None and mapped != permanent:
                raise InvalidArgumentError(
                    "Temporary id is reconciled to a different permanent id",
                    details={"temp_id": temp.value, "permanent_id": mapped.value},
                )

        if permanent in self._in_flight:
            raise FlushInProgressError(
                "A flush is already running for this entity",
                details={"key": str(permanent)},
            )

        if self._queue.get(permanent):
            source = permanent
        elif self._queue.get(temp):
            logger.warning("Flushing %s from unreconciled key %s", permanent, temp)
            source = temp
        else:
            logger.debug("No operations to flush for %s / %s", temp, permanent)
            self._statuses.set(permanent, SyncStatus.SYNCED)
            return []

        snapshot = list(self._queue[source])
        logger.info("Flushing %d operation(s) for %s", len(snapshot), permanent)

        results: list[OperationResult] = []
        self._in_flight.add(permanent)
        self._statuses.set(permanent, SyncStatus.SYNCING)
        try:
            await self._run(snapshot, temp, permanent, results)
        except asyncio.CancelledError:
            # Unfinished operations stay queued with a fresh retry budget.
            for op in snapshot[len(results):]:
                op.retry_count = 0
            logger.warning(
                "Flush for %s cancelled after %d of %d operation(s)",
                permanent,
                len(results),
                len(snapshot),
            )
            raise
        finally:
            self._in_flight.discard(permanent)
            self._settle(snapshot, results, temp, permanent)
        return results

    async def retry_failed_operations(self, key: EntryKey | int) -> list[OperationResult]:
        """
        Reset retry counts for everything still queued under key and flush again.

        Raises:
            InvalidStateError: if key is a temporary id that was never reconciled.
            FlushInProgressError: if this entity is already being flushed.
        """
        current = self._current_key(_coerce_key(key))
        if not isinstance(current, PermanentId):
            raise InvalidStateError(
                "Cannot retry operations before the entity is reconciled",
                details={"key": str(current)},
            )

        operations = self._queue.get(current)
        if not operations:
            logger.debug("No operations to retry for %s", current)
            return []

        if current in self._in_flight:
            raise FlushInProgressError(
                "A flush is already running for this entity",
                details={"key": str(current)},
            )

        for op in operations:
            op.retry_count = 0

        temp_ids = self._id_map.temp_ids_for(current)
        origin: EntryKey = temp_ids[0] if temp_ids else current
        logger.info("Retrying %d operation(s) for %s (origin %s)", len(operations), current, origin)

        return await self.flush(origin, current)

    # ----------------------------
    # Read APIs
    # ----------------------------
    def get_sync_status(self, key: EntryKey | int) -> SyncStatus:
        k = _coerce_key(key)
        if isinstance(k, TemporaryId):
            permanent = self._id_map.get(k)
            if permanent is not None:
                return self._statuses.status_of(permanent)
            return SyncStatus.PENDING if self._queue.get(k) else SyncStatus.SYNCED
        return self._statuses.status_of(k)

    def has_pending_operations(self, key: EntryKey | int) -> bool:
        k = _coerce_key(key)
        if self._queue.get(k):
            return True
        if isinstance(k, PermanentId):
            return any(self._queue.get(t) for t in self._id_map.temp_ids_for(k))
        return False

    def pending_operations(self, key: EntryKey | int) -> tuple[QueuedOperation, ...]:
        """Read-only copy of the operations queued for an entity's current key."""
        current = self._current_key(_coerce_key(key))
        return tuple(self._queue.get(current, ()))

    def is_flushing(self, key: EntryKey | int) -> bool:
        return self._current_key(_coerce_key(key)) in self._in_flight

    def queue_size(self) -> int:
        return sum(len(ops) for ops in self._queue.values())

    def debug_info(self) -> QueueDebugInfo:
        return QueueDebugInfo(
            queue_size=self.queue_size(),
            id_mappings=len(self._id_map),
            sync_statuses=len(self._statuses),
            queued_keys=[str(k) for k in self._queue],
        )

    # ----------------------------
    # Internals
    # ----------------------------
    def _current_key(self, key: EntryKey) -> EntryKey:
        if isinstance(key, TemporaryId):
            return self._id_map.get(key) or key
        return key

    async def _run(
        self,
        snapshot: list[QueuedOperation],
        temp: EntryKey,
        permanent: PermanentId,
        results: list[OperationResult],
    ) -> None:
        for op in snapshot:
            deleted = permanent in self._tombstoned or temp in self._tombstoned
            # The delete itself still has to reach the remote side.
            if deleted and op.kind is not OperationKind.DELETE:
                logger.info("Skipping %s for deleted entity %s", op.kind.value, permanent)
                results.append(_skipped_result(op))
                continue
            results.append(await self._execute_with_retry(op, permanent))

    async def _execute_with_retry(
        self,
        op: QueuedOperation,
        permanent: PermanentId,
    ) -> OperationResult:
        attempts = 0
        while True:
            attempts += 1
            try:
                await _invoke(op, permanent)
            except Exception as exc:
                if not self._retry_policy.can_retry(op.retry_count):
                    logger.error(
                        "%s for %s failed after %d attempt(s): %s",
                        op.kind.value,
                        permanent,
                        attempts,
                        exc,
                    )
                    return _failed_result(op, exc, attempts)

                delay = self._retry_policy.delay_for(op.retry_count)
                logger.warning(
                    "%s for %s failed (%s); retrying in %.2fs (attempt %d/%d)",
                    op.kind.value,
                    permanent,
                    exc,
                    delay,
                    op.retry_count + 1,
                    self._retry_policy.max_retries,
                )
                await self._sleep(delay)
                op.retry_count += 1
                continue

            logger.debug("Executed %s for %s", op.kind.value, permanent)
            return _success_result(op, attempts)

    def _settle(
        self,
        snapshot: list[QueuedOperation],
        results: list[OperationResult],
        temp: EntryKey,
        permanent: PermanentId,
    ) -> None:
        done = {id(op) for op, r in zip(snapshot, results) if r.status != "failed"}
        failed = any(r.status == "failed" for r in results)

        remaining: list[QueuedOperation] = []
        for key in _unique_keys(permanent, temp):
            remaining.extend(op for op in self._queue.pop(key, []) if id(op) not in done)
        if remaining:
            for op in remaining:
                op.key = permanent
            self._queue[permanent] = remaining

        if temp != permanent:
            self._statuses.discard(temp)

        if failed:
            self._statuses.set(permanent, SyncStatus.ERROR)
            logger.warning("Flush for %s finished with failures", permanent)
        elif remaining:
            self._statuses.set(permanent, SyncStatus.PENDING)
            logger.info("Flush for %s finished; %d new operation(s) queued", permanent, len(remaining))
        else:
            self._statuses.set(permanent, SyncStatus.SYNCED)
            logger.info("All operations completed for %s", permanent)


async def _invoke(op: QueuedOperation, permanent: PermanentId) -> None:
    outcome = op.executor(permanent.value)
    if inspect.isawaitable(outcome):
        await outcome


def _coerce_key(value: EntryKey | int) -> EntryKey:
    try:
        return to_entry_key(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            "Invalid entity id",
            details={"value": repr(value)},
            cause=exc,
        ) from exc


def _require_temporary(value: EntryKey | int) -> TemporaryId:
    key = _coerce_key(value)
    if not isinstance(key, TemporaryId):
        raise InvalidArgumentError("Expected a temporary id", details={"value": str(key)})
    return key


def _require_permanent(value: EntryKey | int) -> PermanentId:
    key = _coerce_key(value)
    if not isinstance(key, PermanentId):
        raise InvalidArgumentError("Expected a permanent id", details={"value": str(key)})
    return key


def _unique_keys(*keys: EntryKey) -> list[EntryKey]:
    unique: list[EntryKey] = []
    for key in keys:
        if key not in unique:
            unique.append(key)
    return unique


def _success_result(op: QueuedOperation, attempts: int) -> OperationResult:
    return OperationResult(
        op_id=op.op_id,
        kind=op.kind.value,
        status="success",
        attempts=attempts,
    )


def _failed_result(op: QueuedOperation, exc: Exception, attempts: int) -> OperationResult:
    return OperationResult(
        op_id=op.op_id,
        kind=op.kind.value,
        status="failed",
        attempts=attempts,
        error_type=exc.__class__.__name__,
        error_message=str(exc) or exc.__class__.__name__,
        error_details=getattr(exc, "details", None),
    )


def _skipped_result(op: QueuedOperation) -> OperationResult:
    return OperationResult(
        op_id=op.op_id,
        kind=op.kind.value,
        status="skipped",
    )
