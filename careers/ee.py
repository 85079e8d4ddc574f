from careers.logger import get_logger

logger = get_logger(__name__)


class EventEmitter:
    def __init__(self):
        self._listeners = {}

    def on(self, event, handler):
        logger.debug(f"[EventEmitter] on('{event}') → {handler}")
        self._listeners.setdefault(event, []).append(handler)

    def off(self, event, handler):
        logger.debug(f"[EventEmitter] off('{event}') → {handler}")
        if handler in self._listeners.get(event, []):
            self._listeners[event].remove(handler)

    def listeners(self, event):
        return list(self._listeners.get(event, []))

    def emit(self, event, *args, **kwargs):
        for handler in self.listeners(event):
            logger.debug(f"[EventEmitter] Emitting '{event}' → {handler}")
            handler(*args, **kwargs)

__all__ = ["EventEmitter"]
