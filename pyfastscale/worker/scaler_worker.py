"""
Background scaler worker.

A ScalerWorker owns one ResizeEngine and answers one message at a time. It is
transport agnostic: ``handle`` maps a message dict to a response dict, and
``serve`` drives it over any connection with send/recv/poll (a
multiprocessing Pipe end, typically inside a Process or Thread).

Usage:
    parent, child = multiprocessing.Pipe()
    Process(target=serve, args=(child,), kwargs={"prefer_gpu": True}).start()
    wait_ready(parent, timeout=60)
    parent.send(scale_request(1, pixels, 640, 480, 320, 240, {"filter": "box"}))
    response = parent.recv()
"""

from ..dispatch import ResizeEngine
from ..logger import log
from .messages import error_response, parse_scale_request, ready_message, scale_response


class WorkerNotReadyError(RuntimeError):
    """A scale message arrived before the readiness handshake."""


class ScalerWorker:
    """
    Message handler around a ResizeEngine.

    Args:
        engine: Engine to use. Built lazily by start() when omitted
        prefer_gpu: Passed to the default ResizeEngine
    """

    def __init__(self, engine=None, prefer_gpu: bool = True):
        self.engine = engine
        self.prefer_gpu = prefer_gpu
        self.ready = False
        self.running = True
        self._handlers = {
            "scale": self._handle_scale,
            "test": self._handle_test,
            "shutdown": self._handle_shutdown,
        }

    def start(self):
        """Build the engine and probe its backends (this compiles the GPU kernels), then report ready."""
        if self.engine is None:
            self.engine = ResizeEngine(prefer_gpu=self.prefer_gpu)
        backends = self.engine.probe()
        self.ready = True
        log.debug(f"Worker: ready backends={backends}")
        return ready_message()

    def handle(self, message):
        """Process one message. Failures come back as error responses, never as exceptions."""
        if not isinstance(message, dict):
            return error_response(f"message must be a dict, got {type(message).__name__}")
        request_id = message.get("id")
        handler = self._handlers.get(message.get("type"))
        if handler is None:
            return error_response(f"unknown message type: {message.get('type')!r}", request_id)
        try:
            return handler(message)
        except Exception as e:
            log.error(f"Worker: id={request_id} type={message.get('type')} failed: {e}")
            return error_response(e, request_id)

    def _handle_scale(self, message):
        if not self.ready:
            raise WorkerNotReadyError("worker received a scale request before it was ready")
        request = parse_scale_request(message)
        result = self.engine.resize(request)
        return scale_response(
            message.get("id"),
            result,
            request.to_width,
            request.to_height,
            message.get("extra"),
        )

    def _handle_test(self, message):
        return dict(message)

    def _handle_shutdown(self, message):
        self.running = False
        return {"type": "shutdown", "id": message.get("id")}


def serve(connection, worker=None, prefer_gpu: bool = True):
    """
    Run a worker loop on ``connection`` until a shutdown message arrives or
    the other end closes the connection.

    The ready message is sent first; if the engine cannot be built an error
    response is sent instead and the loop does not start.
    """
    if worker is None:
        worker = ScalerWorker(prefer_gpu=prefer_gpu)
    try:
        connection.send(worker.start())
    except Exception as e:
        log.error(f"Worker: start failed: {e}")
        connection.send(error_response(e))
        return
    while worker.running:
        try:
            message = connection.recv()
        except (EOFError, OSError) as e:
            # the other end is gone, same as a shutdown
            log.debug(f"Worker: connection closed, stopping: {e!r}")
            worker.running = False
            break
        response = worker.handle(message)
        try:
            connection.send(response)
        except (EOFError, OSError) as e:
            log.debug(f"Worker: connection closed, dropping response: {e!r}")
            worker.running = False


def wait_ready(connection, timeout: float = 30.0):
    """
    Block until the worker's readiness message arrives.

    Raises:
        TimeoutError: If nothing arrives within ``timeout`` seconds
        RuntimeError: If the worker reported an error instead
    """
    if not connection.poll(timeout):
        raise TimeoutError(f"worker not ready after {timeout}s")
    message = connection.recv()
    if message.get("type") != "ready":
        raise RuntimeError(f"worker failed to start: {message.get('message', message)}")
    return message


__all__ = ["ScalerWorker", "WorkerNotReadyError", "serve", "wait_ready"]
