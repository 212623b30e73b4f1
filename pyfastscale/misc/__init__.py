"""
Miscellaneous utilities for PyFastScale.

Image file loading and saving around the flat RGBA buffer format.
"""

from .image_io import load_image_rgba, save_image_rgba

__all__ = ["load_image_rgba", "save_image_rgba"]
