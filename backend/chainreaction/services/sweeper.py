import logging

log = logging.getLogger(__name__)


class RoomSweeper:
    """Periodically drops rooms whose roster is empty.

    - Runs as a single Flask-SocketIO background task (``socketio.sleep`` between passes)
    - Holds ``registry.lock`` while sweeping so it never overlaps a handler
    - ``stop()`` ends the loop at its next wake-up
    """

    def __init__(self, socketio, registry, interval_sec: float = 60.0):
        self.socketio = socketio
        self.registry = registry
        self.interval_sec = interval_sec
        self._running = False
        self._task = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self.registry.attach_sweeper(self)
        self._task = self.socketio.start_background_task(self._worker)
        log.info(f"[sweep-start] interval={self.interval_sec}s")

    def stop(self) -> None:
        if self._running:
            log.info("[sweep-stop]")
        self._running = False

    def run_once(self):
        with self.registry.lock:
            return self.registry.sweep_empty()

    def _worker(self) -> None:
        while self._running:
            self.socketio.sleep(self.interval_sec)
            if not self._running:
                return
            self.run_once()
