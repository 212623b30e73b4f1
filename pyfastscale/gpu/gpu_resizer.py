"""
GPU resize backend built on Taichi.

TaichiResizer runs the same pipeline as the CPU resizer (linearise, horizontal
axis, vertical axis, re-encode, unsharp) with each pass as a Taichi kernel on
pooled fields. The multi-step schedule comes from the shared multistep module,
so both backends take identical intermediate sizes.

Any Taichi failure is reported as GPUBackendError, which the dispatch engine
treats as recoverable.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from ..errors import GPUBackendError
from ..filters import FILTER_INDEX, GaussianKernelCache, get_filter
from ..logger import log
from ..pool import TaiPool
from ..rastermanip.multistep import axis_steps
from ..rastermanip.request import validate_request, write_result
from . import kernels as gk

_ARCHS = {
    "gpu": ti.gpu,
    "cpu": ti.cpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
    "opengl": ti.opengl,
}


def _running_on_cpu() -> bool:
    return ti.lang.impl.current_cfg().arch in (ti.x64, ti.arm64)


class TaichiResizer:
    """
    Taichi implementation of the resize pipeline.

    Args:
        arch: Taichi arch name ("gpu", "cuda", "vulkan", "metal", "opengl" or "cpu")
        max_texture_size: Largest source side the backend accepts; the
            dispatch engine prepasses larger sources on the CPU
        initialize: Call ti.init on first use. Pass False when the caller
            already initialised Taichi (tests do this with ti.cpu)
        kernels: GaussianKernelCache shared with nothing else by default
        pool: TaiPool for intermediate fields; its max_free bounds the
            device memory kept between calls

    Only one initialising resizer should exist per process: ti.init resets the
    runtime and invalidates every field allocated before it.
    """

    name = "gpu"

    def __init__(
        self,
        arch: str = "gpu",
        max_texture_size: int = cte.DEFAULT_MAX_TEXTURE_SIZE,
        initialize: bool = True,
        kernels=None,
        pool=None,
    ):
        if arch not in _ARCHS:
            raise ValueError(f"Unknown Taichi arch '{arch}'. Available: {sorted(_ARCHS)}")
        if max_texture_size <= 0:
            raise ValueError("max_texture_size must be > 0")
        self.arch = arch
        self.max_texture_size = int(max_texture_size)
        self.initialize = initialize
        self.kernels = kernels if kernels is not None else GaussianKernelCache()
        self.pool = pool if pool is not None else TaiPool()
        self.probe_error = None
        self._available = None

    def available(self) -> bool:
        """Probe the runtime once: initialise, reject silent cpu fallback, compile a warm-up pass."""
        if self._available is not None:
            return self._available
        try:
            if self.initialize:
                ti.init(arch=_ARCHS[self.arch], offline_cache=True)
            if self.arch != "cpu" and _running_on_cpu():
                raise GPUBackendError("no GPU device, Taichi fell back to cpu", backend=self.name)
            self._warm_up()
            self._available = True
            log.debug(f"GPU: arch={self.arch} ready")
        except Exception as e:
            self.probe_error = e
            self._available = False
            log.warning(f"GPU: arch={self.arch} unavailable: {e}")
        return self._available

    def _warm_up(self):
        # 2x2 -> 1x1 with unsharp touches every kernel once
        pixels = np.full(4 * cte.CHANNELS, 128, dtype=np.uint8)
        self._run(pixels, 2, 2, 1, 1, get_filter("box"), True, True, 50.0, 0.5, 0.0)

    def fits(self, width: int, height: int) -> bool:
        return width <= self.max_texture_size and height <= self.max_texture_size

    def clear_caches(self):
        self.kernels.clear()
        self.pool.clear()

    def resize(self, request):
        """
        Resize according to ``request`` on the Taichi runtime.

        Returns:
            numpy.ndarray: Same contract as CPUResizer.resize

        Raises:
            ResizeValidationError: If the request is invalid
            GPUBackendError: If the runtime is unavailable, the source is larger
                than max_texture_size or a kernel fails
        """
        req = validate_request(request)
        src = req.source

        if req.is_empty_target:
            if req.dest is not None:
                return req.dest
            return np.zeros(0, dtype=src.kind.dtype)

        if req.is_identity:
            log.debug(f"Resize: backend=gpu skip={src.width}x{src.height}")
            return write_result(src.data.copy(), req.dest)

        if not self.available():
            raise GPUBackendError(f"GPU backend unavailable: {self.probe_error}", backend=self.name)
        if not self.fits(src.width, src.height):
            raise GPUBackendError(
                f"source {src.width}x{src.height} exceeds max texture size {self.max_texture_size}",
                backend=self.name,
            )

        log.debug(
            f"Resize: backend=gpu source={src.width}x{src.height} "
            f"target={req.to_width}x{req.to_height} filter={req.filter_config.name} "
            f"gamma={req.gamma_correct} kind={src.kind.value}"
        )
        try:
            result = self._run(
                src.data,
                src.width,
                src.height,
                req.to_width,
                req.to_height,
                req.filter_config,
                req.gamma_correct,
                req.wants_unsharp,
                req.unsharp_amount,
                req.unsharp_radius,
                req.unsharp_threshold,
            )
        except GPUBackendError:
            raise
        except Exception as e:
            raise GPUBackendError(f"GPU resize failed: {e}", backend=self.name) from e
        return write_result(result, req.dest)

    def _run(
        self,
        data,
        width,
        height,
        to_width,
        to_height,
        filter_config,
        gamma_correct,
        wants_unsharp,
        unsharp_amount,
        unsharp_radius,
        unsharp_threshold,
    ):
        is_float_source = np.issubdtype(data.dtype, np.floating)
        linearize = gamma_correct and not is_float_source
        is_linear = is_float_source or linearize
        support = float(filter_config.support)
        filter_type = FILTER_INDEX[filter_config.name]
        quantize = 0 if is_linear else 1

        taken = []

        def take(w, h):
            tpf = self.pool.get_tpfield(cte.FLOAT_TYPE_TI, (w * h,), n=cte.CHANNELS)
            taken.append(tpf)
            return tpf.field

        try:
            w, h = width, height
            current = take(w, h)
            current.from_numpy(data.reshape(-1, cte.CHANNELS).astype(cte.FLOAT_TYPE_NP))

            if linearize:
                linear = take(w, h)
                gk.to_linear_kernel(current, linear, w * h)
                current = linear

            for next_w in axis_steps(w, to_width):
                out = take(next_w, h)
                gk.resize_pass_kernel(
                    current, out, w, h, next_w, h, 1, filter_type, support, quantize
                )
                current, w = out, next_w

            for next_h in axis_steps(h, to_height):
                out = take(w, next_h)
                gk.resize_pass_kernel(
                    current, out, w, h, w, next_h, 0, filter_type, support, quantize
                )
                current, h = out, next_h

            if linearize or (wants_unsharp and is_float_source):
                encoded = take(w, h)
                gk.to_srgb_kernel(current, encoded, w * h)
                current = encoded

            if wants_unsharp:
                current = self._unsharp(
                    current, w, h, unsharp_amount, unsharp_radius, unsharp_threshold, take, taken
                )
                if is_float_source:
                    linear = take(w, h)
                    gk.to_linear_kernel(current, linear, w * h)
                    current = linear

            pixels = current.to_numpy().reshape(-1)
        finally:
            for tpf in taken:
                tpf.release()

        if is_float_source:
            return pixels.astype(cte.FLOAT_TYPE_NP)
        return np.clip(np.rint(pixels), 0, 255).astype(np.uint8)

    def _unsharp(self, current, w, h, amount, radius, threshold, take, taken):
        sigma = min(max(radius, cte.MIN_BLUR_SIGMA), cte.MAX_UNSHARP_RADIUS)
        kernel = self.kernels.create(sigma)
        half = len(kernel) // 2

        weights = self.pool.get_tpfield(cte.FLOAT_TYPE_TI, (len(kernel),), n=1)
        taken.append(weights)
        weights.field.from_numpy(kernel.astype(cte.FLOAT_TYPE_NP))

        blurred_h = take(w, h)
        gk.blur_pass_kernel(current, blurred_h, weights.field, half, w, h, 1)
        blurred = take(w, h)
        gk.blur_pass_kernel(blurred_h, blurred, weights.field, half, w, h, 0)

        out = take(w, h)
        gk.unsharp_kernel(current, blurred, out, w * h, amount / 100.0, threshold)
        return out


__all__ = ["TaichiResizer"]
