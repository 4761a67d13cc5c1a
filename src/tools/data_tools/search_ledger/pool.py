"""Bounded SQLite connection pool shared by concurrent requests."""

import logging
import queue
import sqlite3
import threading
from contextlib import contextmanager
from collections.abc import Iterator

from src.tools.shared_libraries.errors import StoreUnavailable


logger = logging.getLogger(__name__)


class ConnectionPool:
    """Hands out at most `size` connections; waiting is bounded by `timeout`.

    Connections are opened lazily and reused.
    """

    def __init__(self, db_path: str, size: int = 5, timeout: float = 5.0):
        self.db_path = db_path
        self.size = size
        self.timeout = timeout
        self._idle: queue.LifoQueue[sqlite3.Connection] = queue.LifoQueue()
        self._slots = threading.BoundedSemaphore(size)
        self._lock = threading.Lock()
        self._all: list[sqlite3.Connection] = []

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        with self._lock:
            self._all.append(conn)
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Borrow a connection for the duration of the block.

        Raises:
            StoreUnavailable: If no connection frees up within the timeout,
                or a new one cannot be opened.
        """
        if not self._slots.acquire(timeout=self.timeout):
            raise StoreUnavailable(
                'Search history store is busy',
                details=f'no connection available after {self.timeout}s',
            )
        try:
            try:
                conn = self._idle.get_nowait()
            except queue.Empty:
                try:
                    conn = self._open()
                except sqlite3.Error as e:
                    raise StoreUnavailable(
                        'Search history store is unreachable', details=str(e)
                    ) from e
            try:
                yield conn
            finally:
                self._idle.put(conn)
        finally:
            self._slots.release()

    def close(self) -> None:
        """Close every connection the pool has opened."""
        with self._lock:
            connections, self._all = self._all, []
        while True:
            try:
                self._idle.get_nowait()
            except queue.Empty:
                break
        for conn in connections:
            conn.close()
        logger.info(f'Closed {len(connections)} connection(s) to {self.db_path}')
