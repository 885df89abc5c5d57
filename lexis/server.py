"""Service lifecycle – model loading, serving and graceful shutdown.

``INITIALIZING``: the detector is built (loading language models can take
seconds) before any socket is bound, so no request is ever accepted early.

``SERVING``: uvicorn runs on a worker thread; the main thread owns signal
handling.

``DRAINING``: on SIGINT / SIGTERM uvicorn stops accepting connections and
waits for in-flight requests with no deadline of its own.

``STOPPED``: the worker thread has joined and the process exits 0.
"""

from __future__ import annotations

import enum
import logging
import signal
import sys
import threading
from typing import Callable

import uvicorn

from lexis import logger as detection_logger
from lexis.config import Settings, load_settings
from lexis.main import create_app
from lexis.pipeline.detector import LanguageDetector, build_detector

_log = logging.getLogger("lexis.server")

_HOST = "0.0.0.0"
_STARTUP_POLL_SECONDS = 0.05
_SIGNAL_POLL_SECONDS = 0.2


class LifecycleState(str, enum.Enum):
    INITIALIZING = "initializing"
    SERVING = "serving"
    DRAINING = "draining"
    STOPPED = "stopped"


class StartupError(RuntimeError):
    """The service could not reach the serving state."""


class ServiceLifecycle:
    """Brings the listener up after the detector is ready and drains it on exit."""

    def __init__(
        self,
        settings: Settings,
        detector_factory: Callable[[Settings], LanguageDetector] | None = None,
    ) -> None:
        self.settings = settings
        self._detector_factory = detector_factory or (
            lambda s: build_detector(s.detector_backend)
        )
        self.state = LifecycleState.INITIALIZING
        self.server: uvicorn.Server | None = None

        self._thread: threading.Thread | None = None
        self._server_exited = threading.Event()
        self._shutdown_lock = threading.Lock()
        self._signal_received: int | None = None
        self._server_error: BaseException | None = None

    # ── Startup ──────────────────────────────────────────────────────────

    def _build_server(self, detector: LanguageDetector) -> uvicorn.Server:
        try:
            port = self.settings.bind_port
        except ValueError as exc:
            raise StartupError(f"Invalid PORT '{self.settings.port}'") from exc

        config = uvicorn.Config(
            create_app(detector, self.settings),
            host=_HOST,
            port=port,
            log_config=None,
            timeout_graceful_shutdown=None,
        )
        return uvicorn.Server(config)

    def _serve(self, server: uvicorn.Server) -> None:
        try:
            server.run()
        except BaseException as exc:  # uvicorn calls sys.exit(1) when it cannot bind
            self._server_error = exc
        finally:
            self._server_exited.set()

    def _initialize(self) -> None:
        """Load the detector and build (but do not bind) the listener."""
        _log.info("Loading language models into memory (backend=%s)...",
                  self.settings.detector_backend)
        try:
            detector = self._detector_factory(self.settings)
        except Exception as exc:
            raise StartupError(f"Detector initialisation failed: {exc}") from exc
        _log.info("Models are ready")

        self.server = self._build_server(detector)

    def _listen(self) -> None:
        server = self.server
        if server is None:
            raise StartupError("Listener was not initialised")
        self._thread = threading.Thread(
            target=self._serve, args=(server,), name="lexis-http", daemon=True
        )
        self._thread.start()

        while not server.started:
            if self._server_exited.wait(_STARTUP_POLL_SECONDS):
                raise StartupError(
                    f"Listener failed to start on port {self.settings.port}"
                )

        self.state = LifecycleState.SERVING
        _log.info("Lexis is listening on port %s", self.settings.port)

    def start(self) -> None:
        """Load the detector, then bind the listener.  Raises ``StartupError``."""
        self._initialize()
        self._listen()

    # ── Shutdown ─────────────────────────────────────────────────────────

    def _handle_signal(self, signum: int, frame) -> None:
        # Only record the signal; the main loop polls for it
        self._signal_received = signum

    def install_signal_handlers(self) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self._handle_signal)

    def shutdown(self) -> None:
        """Stop accepting, wait for in-flight requests, then stop.  Idempotent."""
        with self._shutdown_lock:
            if self.state is not LifecycleState.SERVING:
                return
            self.state = LifecycleState.DRAINING

        _log.info("Shutting down...")
        if self.server is None or self._thread is None:
            raise RuntimeError("Lifecycle is serving without a listener")
        self.server.should_exit = True
        self._thread.join()
        self.state = LifecycleState.STOPPED
        _log.info("Bye!")

    # ── Entry ────────────────────────────────────────────────────────────

    def run(self) -> int:
        """Serve until a termination signal arrives.  Returns the exit status."""
        try:
            self._initialize()
            # Installed before the listener thread exists so no signal is lost
            self.install_signal_handlers()
            self._listen()
        except StartupError as exc:
            _log.error("Fatal startup error: %s", exc)
            self.state = LifecycleState.STOPPED
            return 1

        while self._signal_received is None and not self._server_exited.is_set():
            self._server_exited.wait(_SIGNAL_POLL_SECONDS)

        if self._signal_received is None:
            _log.error("Listener stopped unexpectedly: %s", self._server_error)
            self.state = LifecycleState.STOPPED
            return 1

        _log.info("Received %s", signal.Signals(self._signal_received).name)
        self.shutdown()
        return 0


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    detection_logger.configure(settings.detection_log_path)
    sys.exit(ServiceLifecycle(settings).run())


if __name__ == "__main__":
    main()
