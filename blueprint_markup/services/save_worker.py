"""
MarkupSaveQueue - Async persistence calls with QThreadPool

Pattern: Background network round-trips with QRunnable workers. Results
come back through Qt signals on the UI thread, so editing never waits
for the store. Each request captures its snapshot at submit time; a new
save never cancels one already in flight.
"""

import itertools
import logging
import time
from typing import Callable, Any, Optional

from PyQt6.QtCore import QObject, QRunnable, pyqtSignal, QThreadPool

from ..config import Config
from ..core.elements import Snapshot
from ..core.errors import MarkupError
from .markup_persistence import MarkupPersistenceBridge, validate_save_name

logger = logging.getLogger(__name__)


class PersistenceTaskSignals(QObject):
    """Signals for PersistenceTask"""

    finished = pyqtSignal(str, str, object, float)  # request_id, operation, result, elapsed_ms
    failed = pyqtSignal(str, str, object)  # request_id, operation, exception


class PersistenceTask(QRunnable):
    """
    Background task running one bridge call.

    Usage:
        task = PersistenceTask("req-1", "save_live", lambda: bridge.save_live(bid, snap))
        threadpool.start(task)
    """

    def __init__(self, request_id: str, operation: str, call: Callable[[], Any]):
        super().__init__()
        self.request_id = request_id
        self.operation = operation
        self.call = call
        self.signals = PersistenceTaskSignals()
        self.start_time = time.time()

    def run(self):
        """Execute the persistence call"""
        try:
            result = self.call()
        except MarkupError as e:
            self.signals.failed.emit(self.request_id, self.operation, e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error in {self.operation} ({self.request_id})")
            self.signals.failed.emit(self.request_id, self.operation, e)
            return

        elapsed_ms = (time.time() - self.start_time) * 1000
        self.signals.finished.emit(self.request_id, self.operation, result, elapsed_ms)


class MarkupSaveQueue(QObject):
    """
    Runs MarkupPersistenceBridge calls on a thread pool.

    Usage:
        queue = MarkupSaveQueue(bridge)
        queue.live_saved.connect(on_saved)
        queue.request_failed.connect(on_failed)
        queue.save_live(blueprint_id, session.elements)
    """

    # Signals
    blueprint_opened = pyqtSignal(str, object, object)  # request_id, Blueprint, Snapshot
    live_saved = pyqtSignal(str, object)  # request_id, LiveSaveResult
    named_saved = pyqtSignal(str, object)  # request_id, NamedMarkupSave
    named_listed = pyqtSignal(str, list)  # request_id, List[NamedMarkupSave]
    image_fetched = pyqtSignal(str, object)  # request_id, image bytes
    request_failed = pyqtSignal(str, str, str)  # request_id, operation, error_message

    def __init__(self, bridge: MarkupPersistenceBridge, parent=None,
                 thread_pool: Optional[QThreadPool] = None):
        super().__init__(parent)
        self._bridge = bridge
        self._ids = itertools.count(1)
        self._pending = set()

        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self.thread_pool.setMaxThreadCount(max(self.thread_pool.maxThreadCount(), Config.SAVE_THREAD_COUNT))

    @property
    def bridge(self) -> MarkupPersistenceBridge:
        return self._bridge

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _submit(self, operation: str, call: Callable[[], Any]) -> str:
        request_id = f"{operation}-{next(self._ids)}"
        task = PersistenceTask(request_id, operation, call)
        task.signals.finished.connect(self._on_finished)
        task.signals.failed.connect(self._on_failed)
        self._pending.add(request_id)
        self.thread_pool.start(task)
        logger.debug(f"Queued {request_id}")
        return request_id

    # ==================== Requests ====================

    def open_blueprint(self, blueprint_id: str) -> str:
        return self._submit('open_blueprint', lambda: self._bridge.open_blueprint(blueprint_id))

    def save_live(self, blueprint_id: str, snapshot: Snapshot) -> str:
        snapshot = tuple(snapshot)
        return self._submit('save_live', lambda: self._bridge.save_live(blueprint_id, snapshot))

    def save_named(
        self,
        blueprint_id: str,
        name: str,
        snapshot: Snapshot,
        description: Optional[str] = None,
        is_shared: bool = False,
        owner_id: Optional[str] = None
    ) -> str:
        """
        Queue a named save.

        Raises:
            ValidationError: immediately, if name is empty (nothing is queued)
        """
        name = validate_save_name(name)
        snapshot = tuple(snapshot)
        return self._submit('save_named', lambda: self._bridge.save_named(
            blueprint_id, name, snapshot,
            description=description, is_shared=is_shared, owner_id=owner_id
        ))

    def list_named(self, blueprint_id: str) -> str:
        return self._submit('list_named', lambda: self._bridge.list_named(blueprint_id))

    def fetch_image(self, url: str) -> str:
        return self._submit('fetch_image', lambda: self._bridge.store.fetch_image(url))

    # ==================== Results ====================

    def _on_finished(self, request_id: str, operation: str, result: Any, elapsed_ms: float):
        self._pending.discard(request_id)
        logger.debug(f"{request_id} finished in {elapsed_ms:.0f} ms")

        if operation == 'open_blueprint':
            blueprint, snapshot = result
            self.blueprint_opened.emit(request_id, blueprint, snapshot)
        elif operation == 'save_live':
            self.live_saved.emit(request_id, result)
        elif operation == 'save_named':
            self.named_saved.emit(request_id, result)
        elif operation == 'list_named':
            self.named_listed.emit(request_id, list(result))
        elif operation == 'fetch_image':
            self.image_fetched.emit(request_id, bytes(result))

    def _on_failed(self, request_id: str, operation: str, error: Exception):
        self._pending.discard(request_id)
        logger.warning(f"{request_id} failed: {error}")
        self.request_failed.emit(request_id, operation, str(error))


__all__ = ['MarkupSaveQueue', 'PersistenceTask', 'PersistenceTaskSignals']
