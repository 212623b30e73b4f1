"""
Resize engine with an ordered backend fallback chain.

The engine validates a request once, then walks its backends in order. A
backend that reports itself unavailable is skipped; a BackendError from any
backend but the last one is logged and the next backend is tried. The last
backend (the CPU resizer by default) is authoritative: its errors propagate.
Validation errors are never retried.
"""

from dataclasses import replace
from typing import Protocol, runtime_checkable

import numpy as np

from ..errors import BackendError
from ..gpu import TaichiResizer
from ..logger import log
from ..rastermanip.buffers import PixelBuffer, check_buffer_length
from ..rastermanip.request import ValidRequest, validate_request, write_result
from ..rastermanip.resizing import CPUResizer


@runtime_checkable
class ResizeBackend(Protocol):
    """
    Interface every resize backend implements.

    ``resize`` takes a ValidRequest and returns the flat result buffer. A
    backend reports recoverable failures (no device, out of memory, kernel
    errors) by raising BackendError, which makes the engine try the next
    backend; TaichiResizer wraps every runtime failure this way. Any other
    exception is treated as a bug and propagates without fallback.
    """

    name: str

    def available(self) -> bool: ...

    def resize(self, request): ...


class ResizeEngine:
    """
    Resize front end owning the backend chain.

    Args:
        backends: Ordered list of ResizeBackend. Defaults to
            [TaichiResizer, CPUResizer], or [CPUResizer] when prefer_gpu is False
        prefer_gpu: Put the Taichi backend in front of the CPU one
        gpu_arch: Taichi arch for the default GPU backend

    Example:
        engine = ResizeEngine(prefer_gpu=False)
        out = engine.resize({"src": pixels, "width": 4, "height": 4,
                             "to_width": 2, "to_height": 2, "filter": "box"})
    """

    def __init__(self, backends=None, prefer_gpu: bool = True, gpu_arch: str = "gpu"):
        if backends is None:
            backends = [CPUResizer()]
            if prefer_gpu:
                backends.insert(0, TaichiResizer(arch=gpu_arch))
        backends = list(backends)
        if not backends:
            raise ValueError("ResizeEngine needs at least one backend")
        for backend in backends:
            if not isinstance(backend, ResizeBackend):
                raise TypeError(f"{type(backend).__name__} does not implement ResizeBackend")
        self.backends = backends
        self.last_backend = None

    @property
    def terminal(self):
        return self.backends[-1]

    def probe(self):
        """Run every backend's capability probe. Returns {name: available}."""
        return {backend.name: backend.available() for backend in self.backends}

    def clear_caches(self):
        for backend in self.backends:
            clear = getattr(backend, "clear_caches", None)
            if clear is not None:
                clear()

    def resize(self, request):
        """
        Resize through the first backend that succeeds.

        Args:
            request: ResizeRequest, mapping of request fields, or ValidRequest

        Returns:
            numpy.ndarray: Resized flat RGBA buffer, or ``dest`` filled with it

        Raises:
            ResizeValidationError: If the request is invalid
            BackendError: If the terminal backend fails
        """
        req = validate_request(request)
        if req.is_empty_target:
            if req.dest is not None:
                return req.dest
            return np.zeros(0, dtype=req.source.kind.dtype)

        result = self._run_chain(req.without_dest())
        check_buffer_length(result, req.to_width, req.to_height, "result")
        return write_result(result, req.dest)

    def _run_chain(self, req: ValidRequest):
        last = len(self.backends) - 1
        for i, backend in enumerate(self.backends):
            if i == last:
                self.last_backend = backend.name
                return backend.resize(req)
            if not backend.available():
                log.debug(f"Resize: backend={backend.name} unavailable, skipping")
                continue
            try:
                result = backend.resize(self._fit_backend(backend, req))
            except BackendError as e:
                log.warning(f"Resize: backend={backend.name} failed, falling back: {e}")
                continue
            self.last_backend = backend.name
            return result

    def _fit_backend(self, backend, req: ValidRequest) -> ValidRequest:
        """Shrink sources larger than the backend's max texture size on the terminal backend first."""
        limit = getattr(backend, "max_texture_size", None)
        src = req.source
        if limit is None or (src.width <= limit and src.height <= limit):
            return req

        pre_width = min(src.width, limit)
        pre_height = min(src.height, limit)
        log.warning(
            f"Resize: backend={backend.name} source={src.width}x{src.height} exceeds "
            f"max_texture_size={limit}, prepass={pre_width}x{pre_height} on {self.terminal.name}"
        )
        prepass = replace(
            req,
            to_width=pre_width,
            to_height=pre_height,
            unsharp_amount=0.0,
        )
        reduced = self.terminal.resize(prepass)
        return replace(
            req,
            source=PixelBuffer.from_array(reduced, pre_width, pre_height, "prepass"),
        )


__all__ = ["ResizeBackend", "ResizeEngine"]
