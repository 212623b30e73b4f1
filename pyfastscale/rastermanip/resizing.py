"""General image resizing for PyFastScale.

CPU orchestration of a full resize request: validation, identity and empty
fast paths, optional conversion to linear light, horizontal then vertical
resampling (multi-step when the ratio is extreme), conversion back to sRGB and
an optional unsharp mask. This is the canonical implementation the GPU path is
measured against.
"""

import numpy as np

from ..color import to_linear, to_srgb
from ..filters import GaussianKernelCache
from ..logger import log
from .buffers import allocate
from .contributions import ContributionCache
from .multistep import multi_step_horizontal, multi_step_vertical, needs_multi_step
from .request import ResizeRequest, validate_request, write_result
from .separable import resize_horizontal, resize_vertical
from .unsharp import unsharp


class CPUResizer:
    """
    NumPy implementation of the resize pipeline.

    Owns its contribution and Gaussian kernel caches, so two resizers never
    share memoised state. Always available; it is the terminal backend of the
    dispatch chain.
    """

    name = "cpu"

    def __init__(self, contributions=None, kernels=None):
        self.contributions = contributions if contributions is not None else ContributionCache()
        self.kernels = kernels if kernels is not None else GaussianKernelCache()

    def available(self) -> bool:
        return True

    def clear_caches(self):
        self.contributions.clear()
        self.kernels.clear()

    def resize(self, request):
        """
        Resize according to ``request``.

        Args:
            request: ResizeRequest, mapping of request fields, or ValidRequest

        Returns:
            numpy.ndarray: Flat RGBA buffer of to_width * to_height pixels
                (uint8 for byte sources, float32 for float sources), or the
                caller supplied ``dest`` filled with it

        Raises:
            ResizeValidationError: If the request is invalid
        """
        req = validate_request(request)
        src = req.source

        if req.is_empty_target:
            if req.dest is not None:
                return req.dest
            return np.zeros(0, dtype=src.kind.dtype)

        if req.is_identity:
            log.debug(f"Resize: backend=cpu skip={src.width}x{src.height}")
            return write_result(src.data.copy(), req.dest)

        log.debug(
            f"Resize: backend=cpu source={src.width}x{src.height} "
            f"target={req.to_width}x{req.to_height} filter={req.filter_config.name} "
            f"gamma={req.gamma_correct} kind={src.kind.value}"
        )
        return write_result(self.resample(req), req.dest)

    def resample(self, req):
        """Run the resampling pipeline of a validated request into a new buffer."""
        src = req.source
        linearize = req.gamma_correct and not src.is_linear
        is_linear = src.is_linear or linearize
        working = to_linear(src.data) if linearize else src.data

        filter_config = req.filter_config
        width, height = src.width, src.height

        if width != req.to_width:
            if needs_multi_step(width, req.to_width):
                working = multi_step_horizontal(
                    working, width, height, req.to_width, filter_config, is_linear, self.contributions
                )
            else:
                out = allocate(req.to_width, height, is_linear)
                working = resize_horizontal(
                    working, out, width, height, req.to_width, filter_config, is_linear, self.contributions
                )
            width = req.to_width

        if height != req.to_height:
            if needs_multi_step(height, req.to_height):
                working = multi_step_vertical(
                    working, width, height, req.to_height, filter_config, is_linear, self.contributions
                )
            else:
                out = allocate(width, req.to_height, is_linear)
                working = resize_vertical(
                    working, out, width, height, req.to_height, filter_config, is_linear, self.contributions
                )
            height = req.to_height

        result = to_srgb(working) if linearize else working

        if req.wants_unsharp:
            result = self.apply_unsharp(
                result,
                width,
                height,
                src.is_linear,
                req.unsharp_amount,
                req.unsharp_radius,
                req.unsharp_threshold,
            )
        return result

    def apply_unsharp(self, buffer, width, height, is_linear, amount, radius, threshold):
        """Sharpen a final-sized buffer; float buffers round-trip through sRGB bytes."""
        encoded = to_srgb(buffer) if is_linear else buffer
        sharpened = unsharp(encoded, width, height, amount, radius, threshold, self.kernels)
        return to_linear(sharpened) if is_linear else sharpened


def resize(request=None, resizer=None, **kwargs):
    """
    Resize an RGBA pixel buffer on the CPU.

    Args:
        request: ResizeRequest or mapping of request fields. Keyword
                 arguments build one when omitted.
        resizer: CPUResizer to run on (a fresh one by default)
        **kwargs: src, width, height, to_width, to_height, filter,
                  unsharp_amount, unsharp_radius, unsharp_threshold,
                  gamma_correct, dest

    Returns:
        numpy.ndarray: Resized flat RGBA buffer

    Example:
        out = resize(src=pixels, width=640, height=480,
                     to_width=320, to_height=240, filter="lanczos3")
    """
    if request is None:
        request = ResizeRequest(**kwargs)
    elif kwargs:
        raise TypeError("pass either a request or keyword arguments, not both")
    if resizer is None:
        resizer = CPUResizer()
    return resizer.resize(request)


def fit_to_max_dim(width: int, height: int, max_dim: int):
    """
    Target size that fits within ``max_dim`` while preserving the aspect ratio.

    Sizes already within the limit are returned unchanged.

    Returns:
        tuple: (to_width, to_height), each at least 1
    """
    if max_dim <= 0:
        raise ValueError("max_dim must be > 0")
    largest = max(width, height)
    if largest <= max_dim:
        return width, height
    scale = max_dim / largest
    return max(1, int(round(width * scale))), max(1, int(round(height * scale)))


__all__ = ["CPUResizer", "resize", "fit_to_max_dim"]
