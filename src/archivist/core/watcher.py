"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/watcher.py
Recursive file system watcher built on watchdog.

The observer thread only enqueues paths; consumers iterate the watcher on
their own thread, so archive operations stay sequential.
"""

import logging
import os
import queue
import threading
from typing import Callable, Iterator, Optional, Sequence

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from archivist.core.scanner import IgnoreMatcher

logger = logging.getLogger(__name__)


class QueueingEventHandler(FileSystemEventHandler):
    """Collects created, modified and moved file paths into a queue."""

    def __init__(self, event_queue: "queue.Queue[str]", ignores: Optional[IgnoreMatcher] = None):
        super().__init__()
        self._queue = event_queue
        self._ignores = ignores or IgnoreMatcher()

    def _enqueue(self, event: FileSystemEvent, path: str) -> None:
        if event.is_directory or not path:
            return
        path = os.fsdecode(path)
        if self._ignores.match(path):
            logger.debug(f"Ignoring event for {path}")
            return
        logger.debug(f"Queued event for {path}")
        self._queue.put(path)

    def on_created(self, event: FileSystemEvent) -> None:
        self._enqueue(event, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._enqueue(event, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._enqueue(event, event.dest_path)


class RecursiveWatcher:
    """
    Watches directories recursively and exposes file events as an iterator.

    Usage:
        with RecursiveWatcher([src], ignore_patterns) as watcher:
            for path in watcher.iter_events(stopped_flag):
                ...
    """

    def __init__(self, roots: Sequence[str], ignore_patterns: Optional[Sequence[str]] = None,
                 poll_interval: float = 0.5):
        normalized = []
        for root in roots:
            path = os.path.abspath(root)
            if path not in normalized:
                normalized.append(path)
        if not normalized:
            raise ValueError("At least one watch directory must be provided")
        self.roots = tuple(normalized)
        self.poll_interval = poll_interval
        self._queue: "queue.Queue[str]" = queue.Queue()
        self._handler = QueueingEventHandler(self._queue, IgnoreMatcher(list(ignore_patterns or [])))
        self._observer = Observer()
        self._stop_requested = threading.Event()
        self._started = False

    def __enter__(self) -> "RecursiveWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def start(self) -> None:
        for root in self.roots:
            logger.debug(f"Scheduling observer for {root}")
            self._observer.schedule(self._handler, root, recursive=True)
        self._observer.start()
        self._started = True
        self._stop_requested.clear()

    def close(self) -> None:
        self._stop_requested.set()
        if self._started:
            logger.debug("Stopping observer")
            self._observer.stop()
            self._observer.join(timeout=5)
            self._started = False

    def iter_events(self, stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[str]:
        while not self._stop_requested.is_set():
            if stopped_flag and stopped_flag():
                return
            try:
                path = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            yield path

    def __iter__(self) -> Iterator[str]:
        return self.iter_events()
