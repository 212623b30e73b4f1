"""
Taichi kernels for the GPU resize path.

The kernels mirror the CPU pipeline pass for pass: sRGB <-> linear conversion,
one separable resampling pass per call (weights evaluated per output pixel,
normalised, with the same nearest-neighbour fallback), Gaussian blur passes
with reflect-at-edge boundaries and the unsharp combine step. Pixel data lives
in 1D vector fields of 4 float32 channels holding either byte values (0..255)
or linear light values.
"""

import taichi as ti

from .. import constants as cte
from ..filters import FILTER_INDEX

FILTER_BOX = FILTER_INDEX["box"]
FILTER_HAMMING = FILTER_INDEX["hamming"]
FILTER_LANCZOS2 = FILTER_INDEX["lanczos2"]
FILTER_LANCZOS3 = FILTER_INDEX["lanczos3"]
FILTER_MKS2013 = FILTER_INDEX["mks2013"]
FILTER_BICUBIC = FILTER_INDEX["bicubic"]

vec4 = ti.types.vector(4, cte.FLOAT_TYPE_TI)


@ti.func
def _lanczos(x: ti.f32, lobes: ti.f32) -> ti.f32:
    w = 0.0
    ax = ti.abs(x)
    if ax < 1e-6:
        w = 1.0
    elif ax < lobes:
        xpi = ti.math.pi * x
        xpi_l = xpi / lobes
        w = (ti.sin(xpi) * ti.sin(xpi_l)) / (xpi * xpi_l)
    return w


@ti.func
def _mitchell(x: ti.f32) -> ti.f32:
    b = 1.0 / 3.0
    c = 1.0 / 3.0
    ax = ti.abs(x)
    w = 0.0
    if ax < 1.0:
        w = (
            (12.0 - 9.0 * b - 6.0 * c) * ax * ax * ax
            + (-18.0 + 12.0 * b + 6.0 * c) * ax * ax
            + (6.0 - 2.0 * b)
        ) / 6.0
    elif ax < 2.0:
        w = (
            (-b - 6.0 * c) * ax * ax * ax
            + (6.0 * b + 30.0 * c) * ax * ax
            + (-12.0 * b - 48.0 * c) * ax
            + (8.0 * b + 24.0 * c)
        ) / 6.0
    return w


@ti.func
def _bicubic(x: ti.f32) -> ti.f32:
    ax = ti.abs(x)
    w = 0.0
    if ax <= 1.0:
        w = 1.5 * ax * ax * ax - 2.5 * ax * ax + 1.0
    elif ax < 2.0:
        w = -0.5 * ax * ax * ax + 2.5 * ax * ax - 4.0 * ax + 2.0
    return w


@ti.func
def filter_weight(filter_type: ti.i32, x: ti.f32) -> ti.f32:
    """Weight of filter ``filter_type`` (FILTER_INDEX id) at normalised distance x."""
    w = 0.0
    ax = ti.abs(x)
    if filter_type == FILTER_BOX:
        if ax <= 0.5:
            w = 1.0
    elif filter_type == FILTER_HAMMING:
        if ax < 1.0:
            w = 0.54 + 0.46 * ti.cos(ti.math.pi * ax)
    elif filter_type == FILTER_LANCZOS2:
        w = _lanczos(x, 2.0)
    elif filter_type == FILTER_LANCZOS3:
        w = _lanczos(x, 3.0)
    elif filter_type == FILTER_MKS2013:
        w = _mitchell(x)
    elif filter_type == FILTER_BICUBIC:
        w = _bicubic(x)
    return w


@ti.func
def _quantize(v: vec4) -> vec4:
    return ti.math.clamp(ti.floor(v + 0.5), 0.0, 255.0)


@ti.func
def _sample_index(horizontal: ti.i32, s: ti.i32, x: ti.i32, y: ti.i32, src_w: ti.i32) -> ti.i32:
    res = s * src_w + x
    if horizontal == 1:
        res = y * src_w + s
    return res


@ti.func
def _reflect(i: ti.i32, n: ti.i32) -> ti.i32:
    r = i
    if r < 0:
        r = -r
    if r >= n:
        r = 2 * n - r - 1
    return ti.min(ti.max(r, 0), n - 1)


@ti.func
def _srgb_to_linear(c: ti.f32) -> ti.f32:
    v = c / 255.0
    res = v / 12.92
    if v > 0.04045:
        res = ((v + 0.055) / 1.055) ** 2.4
    return res


@ti.func
def _linear_to_srgb(c: ti.f32) -> ti.f32:
    res = 12.92 * c
    if c > 0.0031308:
        res = 1.055 * c ** (1.0 / 2.4) - 0.055
    return res * 255.0


@ti.kernel
def to_linear_kernel(src: ti.template(), dst: ti.template(), n: ti.i32):
    for i in range(n):
        p = src[i]
        dst[i] = ti.Vector(
            [
                _srgb_to_linear(p[0]),
                _srgb_to_linear(p[1]),
                _srgb_to_linear(p[2]),
                p[3] / 255.0,
            ]
        )


@ti.kernel
def to_srgb_kernel(src: ti.template(), dst: ti.template(), n: ti.i32):
    for i in range(n):
        p = src[i]
        encoded = ti.Vector(
            [
                _linear_to_srgb(p[0]),
                _linear_to_srgb(p[1]),
                _linear_to_srgb(p[2]),
                p[3] * 255.0,
            ]
        )
        dst[i] = _quantize(encoded)


@ti.kernel
def resize_pass_kernel(
    src: ti.template(),
    dst: ti.template(),
    src_w: ti.i32,
    src_h: ti.i32,
    dst_w: ti.i32,
    dst_h: ti.i32,
    horizontal: ti.i32,
    filter_type: ti.i32,
    support: ti.f32,
    quantize: ti.i32,
):
    """
    One separable resampling pass along x (horizontal=1) or y (horizontal=0).

    Args:
        src: Vector field of src_w * src_h RGBA samples
        dst: Vector field of dst_w * dst_h RGBA samples
        src_w, src_h: Source dimensions
        dst_w, dst_h: Destination dimensions (only one axis differs)
        horizontal: 1 for a horizontal pass, 0 for a vertical one
        filter_type: FILTER_INDEX id
        support: Filter support at unit scale
        quantize: 1 to round/clamp results to bytes, 0 to keep floats
    """
    for idx in range(dst_w * dst_h):
        y = idx // dst_w
        x = idx % dst_w

        d = x
        src_size = src_w
        dst_size = dst_w
        if horizontal == 0:
            d = y
            src_size = src_h
            dst_size = dst_h

        scale = ti.cast(dst_size, ti.f32) / ti.cast(src_size, ti.f32)
        sup = support
        if scale < 1.0:
            sup = support / scale

        center = (ti.cast(d, ti.f32) + 0.5) / scale
        start = ti.max(0, ti.floor(center - sup, dtype=ti.i32))
        end = ti.min(src_size - 1, ti.ceil(center + sup, dtype=ti.i32))

        acc = ti.Vector([0.0, 0.0, 0.0, 0.0])
        wsum = 0.0
        for s in range(start, end + 1):
            w = filter_weight(filter_type, (center - ti.cast(s, ti.f32) - 0.5) * scale)
            if ti.abs(w) > cte.WEIGHT_EPSILON:
                acc += w * src[_sample_index(horizontal, s, x, y, src_w)]
                wsum += w

        if ti.abs(wsum) > cte.WEIGHT_EPSILON:
            acc /= wsum
        else:
            nearest = ti.floor(center, dtype=ti.i32)
            nearest = ti.min(src_size - 1, ti.max(0, nearest))
            acc = src[_sample_index(horizontal, nearest, x, y, src_w)]

        if quantize == 1:
            acc = _quantize(acc)
        dst[idx] = acc


@ti.kernel
def blur_pass_kernel(
    src: ti.template(),
    dst: ti.template(),
    weights: ti.template(),
    half: ti.i32,
    w: ti.i32,
    h: ti.i32,
    horizontal: ti.i32,
):
    """Gaussian blur pass with reflect-at-edge boundaries, rounded to bytes."""
    for idx in range(w * h):
        y = idx // w
        x = idx % w
        size = h
        pos = y
        if horizontal == 1:
            size = w
            pos = x

        acc = ti.Vector([0.0, 0.0, 0.0, 0.0])
        for k in range(-half, half + 1):
            p = _reflect(pos + k, size)
            sidx = p * w + x
            if horizontal == 1:
                sidx = y * w + p
            acc += weights[k + half] * src[sidx]
        dst[idx] = _quantize(acc)


@ti.func
def _sharpen_channel(o: ti.f32, b: ti.f32, amount: ti.f32, threshold: ti.f32) -> ti.f32:
    diff = o - b
    if ti.abs(diff) < threshold:
        diff = 0.0
    return ti.math.clamp(ti.floor(o + diff * amount + 0.5), 0.0, 255.0)


@ti.kernel
def unsharp_kernel(
    orig: ti.template(),
    blurred: ti.template(),
    dst: ti.template(),
    n: ti.i32,
    amount: ti.f32,
    threshold: ti.f32,
):
    """Add the thresholded residual back onto RGB; ``amount`` is a fraction, not a percentage."""
    for i in range(n):
        o = orig[i]
        b = blurred[i]
        dst[i] = ti.Vector(
            [
                _sharpen_channel(o[0], b[0], amount, threshold),
                _sharpen_channel(o[1], b[1], amount, threshold),
                _sharpen_channel(o[2], b[2], amount, threshold),
                o[3],
            ]
        )


__all__ = [
    "filter_weight",
    "to_linear_kernel",
    "to_srgb_kernel",
    "resize_pass_kernel",
    "blur_pass_kernel",
    "unsharp_kernel",
]
