"""
Global constants for PyFastScale.

Numerical thresholds, cache key precision and request defaults shared by the
CPU and GPU resampling paths. Both paths read the same values so that their
results stay within GPU_PARITY_TOLERANCE of each other.
"""

import numpy as np
import taichi as ti

# Numerical types used by the float (linear light) representation
FLOAT_TYPE_NP = np.float32
FLOAT_TYPE_TI = ti.f32

# Number of interleaved channels (RGBA)
CHANNELS = 4

# Weights with a magnitude below this are dropped, and a weight sum below it
# triggers the nearest-neighbour fallback
WEIGHT_EPSILON = 1e-6

# Cache key quantisation
SCALE_KEY_DIGITS = 4
SIGMA_KEY_DIGITS = 2

# Unsharp mask / Gaussian blur
MIN_BLUR_SIGMA = 0.5
MAX_UNSHARP_RADIUS = 2.0
MIN_UNSHARP_RADIUS = 0.5

# Request defaults
DEFAULT_FILTER = "lanczos3"
DEFAULT_UNSHARP_AMOUNT = 0.0
DEFAULT_UNSHARP_RADIUS = 0.5
DEFAULT_UNSHARP_THRESHOLD = 0.0
DEFAULT_GAMMA_CORRECT = True

# GPU path
DEFAULT_MAX_TEXTURE_SIZE = 16384
DEFAULT_POOL_MAX_FREE = 16
GPU_PARITY_TOLERANCE = 2
