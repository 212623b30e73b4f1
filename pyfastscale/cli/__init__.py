"""
Command Line Interface for PyFastScale

Command line utilities for resizing image files without writing Python scripts.

Available Commands:
- pfs-resize: Resize an image file (filters, gamma-correct processing, unsharp mask)
- pfs-filters: List the available reconstruction filters
"""

_CLI_SUBMODULES = {
    "resize_image": (".resize_commands", "resize_image"),
    "list_filters": (".resize_commands", "list_filters"),
}

__all__ = list(_CLI_SUBMODULES.keys())


def __getattr__(name):
    info = _CLI_SUBMODULES.get(name)
    if info is None:
        raise AttributeError(name)
    pkg, attr = info
    import importlib
    mod = importlib.import_module(pkg, __package__)
    obj = getattr(mod, attr)
    globals()[name] = obj
    return obj
