from typing import Callable, Dict, List, Set
import asyncio
import inspect
import logging
logger = logging.getLogger(__name__)


class EventEmitter:
    """
    Simple event emitter for session events.

    Listeners run synchronously on the caller's thread, in subscription order.
    Coroutine listeners are scheduled on the running loop; the emitter holds
    their tasks until they finish.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {}
        self._tasks: Set[asyncio.Task] = set()

    def on(self, event_name: str, callback: Callable):
        """Subscribe to an event."""
        if event_name not in self._listeners:
            self._listeners[event_name] = []
        if callback not in self._listeners[event_name]:
            self._listeners[event_name].append(callback)

    def off(self, event_name: str, callback: Callable):
        """Unsubscribe from an event."""
        if event_name in self._listeners:
            if callback in self._listeners[event_name]:
                self._listeners[event_name].remove(callback)

    @property
    def pending(self) -> int:
        """Number of coroutine listeners still running."""
        return len(self._tasks)

    def emit(self, event_name: str, *args, **kwargs):
        """Emit an event to all listeners. Listener errors are logged, not raised."""
        if event_name not in self._listeners:
            return

        for callback in self._listeners[event_name][:]:  # Copy list to avoid modification during iteration
            try:
                if inspect.iscoroutinefunction(callback):
                    task = asyncio.get_running_loop().create_task(callback(*args, **kwargs))
                    self._tasks.add(task)
                    task.add_done_callback(lambda t, name=event_name: self._on_task_done(name, t))
                else:
                    callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_name}: {e}")

    def _on_task_done(self, event_name: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Error in event listener for {event_name}: {exc}")
