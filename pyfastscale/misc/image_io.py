"""
Image file helpers for PyFastScale.

Loads image files as flat RGBA8 buffers and writes buffers back, via pillow.
Any mode pillow can open is converted to RGBA on load.
"""

import numpy as np
from PIL import Image

from .. import constants as cte
from ..color import to_srgb
from ..rastermanip.buffers import check_buffer_length


def load_image_rgba(path):
    """
    Load an image file as a flat RGBA8 buffer.

    Args:
        path (str): Image file (PNG, JPEG, WebP, ...)

    Returns:
        tuple: (data, width, height) with data a uint8 array of width * height * 4

    Example:
        data, w, h = load_image_rgba("photo.jpg")
        small = pfs.resize(src=data, width=w, height=h, to_width=w // 2, to_height=h // 2)
    """
    with Image.open(path) as img:
        rgba = img.convert("RGBA")
        width, height = rgba.size
        data = np.asarray(rgba, dtype=np.uint8).reshape(-1).copy()
    return data, width, height


def save_image_rgba(data, width: int, height: int, path):
    """
    Save a flat RGBA buffer to an image file. Float buffers are treated as
    linear light and encoded to sRGB bytes first.

    Formats without alpha (JPEG) are written as RGB.
    """
    data = np.asarray(data)
    if np.issubdtype(data.dtype, np.floating):
        data = to_srgb(data)
    check_buffer_length(data.reshape(-1), width, height, "image")
    img = Image.fromarray(data.reshape(height, width, cte.CHANNELS))
    if str(path).lower().endswith((".jpg", ".jpeg")):
        img = img.convert("RGB")
    img.save(path)


__all__ = ["load_image_rgba", "save_image_rgba"]
