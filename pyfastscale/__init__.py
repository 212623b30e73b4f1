"""
PyFastScale: image resampling on the CPU and, through Taichi, on the GPU.

Resizes flat RGBA pixel buffers with selectable reconstruction filters,
optional gamma-correct (linear light) processing and an optional unsharp
mask. A ResizeEngine runs requests on the GPU when one is available and falls
back to the NumPy implementation otherwise.

Modules:
- filters: reconstruction filters and Gaussian kernels
- color: sRGB <-> linear conversion
- rastermanip: CPU resampling pipeline and request validation
- pool: Taichi field pool
- gpu: Taichi kernels and the GPU resizer
- dispatch: backend fallback chain
- worker: message contract and background scaler worker
- misc: image file I/O
- cli: command line tools

Usage:
    import pyfastscale as pfs

    out = pfs.resize(src=pixels, width=640, height=480,
                     to_width=320, to_height=240, filter="lanczos3")

    engine = pfs.ResizeEngine()
    out = engine.resize(pfs.ResizeRequest(pixels, 640, 480, 320, 240))
"""

__version__ = "0.1.0"

from . import color, constants, dispatch, filters, gpu, misc, pool, rastermanip, worker
from .dispatch import ResizeEngine
from .errors import BackendError, BufferMovedError, GPUBackendError, ResizeValidationError
from .logger import log, setup_logging
from .rastermanip import CPUResizer, ResizeRequest, fit_to_max_dim, resize

__all__ = [
    "__version__",
    "color",
    "constants",
    "dispatch",
    "filters",
    "gpu",
    "misc",
    "pool",
    "rastermanip",
    "worker",
    "ResizeEngine",
    "CPUResizer",
    "ResizeRequest",
    "resize",
    "fit_to_max_dim",
    "log",
    "setup_logging",
    "ResizeValidationError",
    "BackendError",
    "GPUBackendError",
    "BufferMovedError",
]
