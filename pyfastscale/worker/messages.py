"""
Worker message contract.

Messages are plain dicts correlated by an opaque ``id``:

    request  {"type": "scale", "id", "src": {"data", "width", "height"},
              "target": {"width", "height"}, "options": {...}, "extra"?}
    success  {"type": "scale", "id", "result": {"data", "width", "height"}, "extra"}
    failure  {"type": "error", "message", "id"}
    ready    {"type": "ready"}

Pixel data crosses the boundary as RGBA8 whose byte length must be exactly
width * height * 4. It travels inside a BufferHandle with move semantics:
sending or receiving invalidates the handle it was called on, so a buffer
only ever has one owner.
"""

import numpy as np

from .. import constants as cte
from ..errors import BufferMovedError, ResizeValidationError
from ..rastermanip.request import ResizeRequest

OPTION_KEYS = (
    "filter",
    "gamma_correct",
    "unsharp_amount",
    "unsharp_radius",
    "unsharp_threshold",
)


class BufferHandle:
    """
    Single-owner reference to a pixel buffer.

    Example:
        handle = BufferHandle(pixels)
        outgoing = handle.send()      # handle is now unusable
        pixels = outgoing.receive()   # receiver owns the array
    """

    def __init__(self, data):
        self._data = data
        self._moved = False

    @property
    def moved(self) -> bool:
        return self._moved

    def _check(self):
        if self._moved:
            raise BufferMovedError("buffer handle was used after its content was transferred")

    def _take(self):
        self._check()
        data = self._data
        self._data = None
        self._moved = True
        return data

    def view(self):
        """Borrow the buffer without taking ownership."""
        self._check()
        return self._data

    @property
    def nbytes(self) -> int:
        data = self.view()
        if isinstance(data, np.ndarray):
            return data.nbytes
        return memoryview(data).nbytes

    def send(self) -> "BufferHandle":
        """Move the buffer into a new handle; this one is invalidated."""
        return BufferHandle(self._take())

    def receive(self):
        """Take ownership of the buffer; the handle is invalidated."""
        return self._take()

    def __repr__(self):
        if self._moved:
            return "BufferHandle(moved)"
        return f"BufferHandle(nbytes={self.nbytes})"


def as_handle(data) -> BufferHandle:
    if isinstance(data, BufferHandle):
        return data
    return BufferHandle(data)


def ready_message():
    return {"type": "ready"}


def echo_message(payload=None):
    return {"type": "test", "payload": payload}


def shutdown_message():
    return {"type": "shutdown"}


def error_response(message: str, request_id=None):
    return {"type": "error", "message": str(message), "id": request_id}


def scale_request(request_id, data, width, height, to_width, to_height, options=None, extra=None):
    """
    Build a scale request. ``data`` is moved into the message.

    Args:
        request_id: Opaque correlation id echoed in the response
        data: RGBA8 buffer or BufferHandle (sent, so the caller's handle is invalidated)
        width, height: Source dimensions
        to_width, to_height: Target dimensions
        options: Subset of filter, gamma_correct, unsharp_amount,
                 unsharp_radius and unsharp_threshold
        extra: Any value the worker hands back untouched
    """
    message = {
        "type": "scale",
        "id": request_id,
        "src": {"data": as_handle(data).send(), "width": width, "height": height},
        "target": {"width": to_width, "height": to_height},
        "options": dict(options or {}),
    }
    if extra is not None:
        message["extra"] = extra
    return message


def scale_response(request_id, data, width, height, extra=None):
    return {
        "type": "scale",
        "id": request_id,
        "result": {"data": as_handle(data).send(), "width": width, "height": height},
        "extra": extra,
    }


def _dimension(section, key, name, minimum):
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < minimum:
        raise ResizeValidationError(f"{name}.{key} must be an integer >= {minimum}, got {value!r}")
    return int(value)


def parse_scale_request(message) -> ResizeRequest:
    """
    Turn a scale message into a ResizeRequest, taking ownership of its buffer.

    Raises:
        ResizeValidationError: If the message is malformed or the source byte
            length does not equal width * height * 4
    """
    src = message.get("src")
    target = message.get("target")
    if not isinstance(src, dict) or not isinstance(target, dict):
        raise ResizeValidationError("scale message needs 'src' and 'target' sections")

    width = _dimension(src, "width", "src", 1)
    height = _dimension(src, "height", "src", 1)
    to_width = _dimension(target, "width", "target", 1)
    to_height = _dimension(target, "height", "target", 1)

    if "data" not in src:
        raise ResizeValidationError("src.data is missing")
    handle = as_handle(src["data"])
    expected = width * height * cte.CHANNELS
    if handle.nbytes != expected:
        raise ResizeValidationError(
            f"src.data byte length mismatch: got {handle.nbytes}, expected {expected}"
        )
    data = handle.receive()
    if not isinstance(data, np.ndarray):
        data = np.frombuffer(data, dtype=np.uint8)

    options = message.get("options") or {}
    unknown = set(options) - set(OPTION_KEYS)
    if unknown:
        raise ResizeValidationError(f"unknown options: {sorted(unknown)}")

    return ResizeRequest(
        src=data,
        width=width,
        height=height,
        to_width=to_width,
        to_height=to_height,
        **options,
    )


__all__ = [
    "BufferHandle",
    "OPTION_KEYS",
    "as_handle",
    "error_response",
    "parse_scale_request",
    "ready_message",
    "scale_request",
    "scale_response",
    "shutdown_message",
    "echo_message",
]
