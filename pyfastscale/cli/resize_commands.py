"""CLI commands for resizing image files with PyFastScale."""

import sys

import click

from ..dispatch import ResizeEngine
from ..filters import FILTERS, get_filter_info
from ..gpu import TaichiResizer
from ..logger import setup_logging
from ..misc import load_image_rgba, save_image_rgba
from ..rastermanip import fit_to_max_dim
from .. import constants as cte


def target_size(width, height, to_width=None, to_height=None, max_dim=None):
    """
    Resolve the output size from the command options.

    A single given side keeps the aspect ratio; ``max_dim`` bounds the result.
    """
    if to_width is None and to_height is None:
        if max_dim is None:
            raise click.UsageError("give --width, --height or --max-dim")
        return fit_to_max_dim(width, height, max_dim)
    if to_width is None:
        to_width = max(1, int(round(width * to_height / height)))
    if to_height is None:
        to_height = max(1, int(round(height * to_width / width)))
    if max_dim is not None:
        return fit_to_max_dim(to_width, to_height, max_dim)
    return to_width, to_height


def build_engine(backend):
    if backend == "cpu":
        return ResizeEngine(prefer_gpu=False)
    if backend == "gpu":
        return ResizeEngine(backends=[TaichiResizer()])
    return ResizeEngine(prefer_gpu=True)


@click.command()
@click.argument("input_image", type=click.Path(exists=True))
@click.argument("output_image", type=click.Path())
@click.option("--width", "-W", "to_width", type=click.IntRange(min=1), default=None, help="Output width in pixels")
@click.option("--height", "-H", "to_height", type=click.IntRange(min=1), default=None, help="Output height in pixels")
@click.option("--max-dim", "-m", type=click.IntRange(min=1), default=None, help="Fit the output within this size")
@click.option(
    "--filter",
    "-f",
    "filter_name",
    type=click.Choice(sorted(FILTERS)),
    default=cte.DEFAULT_FILTER,
    show_default=True,
    help="Reconstruction filter",
)
@click.option("--gamma/--no-gamma", default=cte.DEFAULT_GAMMA_CORRECT, show_default=True, help="Resample in linear light")
@click.option("--unsharp-amount", type=click.FloatRange(min=0), default=cte.DEFAULT_UNSHARP_AMOUNT, show_default=True, help="Unsharp mask strength in percent (0 disables)")
@click.option("--unsharp-radius", type=click.FloatRange(min=0), default=cte.DEFAULT_UNSHARP_RADIUS, show_default=True, help="Unsharp mask blur radius")
@click.option("--unsharp-threshold", type=click.FloatRange(0, 255), default=cte.DEFAULT_UNSHARP_THRESHOLD, show_default=True, help="Minimum difference to sharpen (0-255)")
@click.option(
    "--backend",
    "-b",
    type=click.Choice(["auto", "cpu", "gpu"]),
    default="auto",
    show_default=True,
    help="auto tries the GPU and falls back to the CPU",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def resize_image(
    input_image,
    output_image,
    to_width,
    to_height,
    max_dim,
    filter_name,
    gamma,
    unsharp_amount,
    unsharp_radius,
    unsharp_threshold,
    backend,
    verbose,
):
    """
    Resize INPUT_IMAGE and save it to OUTPUT_IMAGE.

    Examples:

        # Half-size thumbnail bounded to 512 px
        pfs-resize photo.jpg thumb.png --max-dim 512

        # Exact size with a sharper filter and light sharpening
        pfs-resize photo.png out.png -W 800 -H 600 -f lanczos2 --unsharp-amount 80

        # Force the CPU path
        pfs-resize photo.png out.png -W 100 --backend cpu
    """
    try:
        if verbose:
            setup_logging(debug=True)
            click.echo(f"Loading image from '{input_image}'...")
        data, width, height = load_image_rgba(input_image)
        out_width, out_height = target_size(width, height, to_width, to_height, max_dim)

        if verbose:
            click.echo(
                f"Resizing {width}x{height} -> {out_width}x{out_height} "
                f"(filter={filter_name}, gamma={gamma}, backend={backend})"
            )
        engine = build_engine(backend)
        result = engine.resize(
            {
                "src": data,
                "width": width,
                "height": height,
                "to_width": out_width,
                "to_height": out_height,
                "filter": filter_name,
                "gamma_correct": gamma,
                "unsharp_amount": unsharp_amount,
                "unsharp_radius": unsharp_radius,
                "unsharp_threshold": unsharp_threshold,
            }
        )
        save_image_rgba(result, out_width, out_height, output_image)

        if verbose:
            click.echo(f"Resize completed on backend '{engine.last_backend}'")
        else:
            click.echo(f"Resized '{input_image}' -> '{output_image}' ({out_width}x{out_height})")
    except click.UsageError:
        raise
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.command()
def list_filters():
    """List the available reconstruction filters."""
    info = get_filter_info()
    click.echo(f"{'name':<10} {'support':>8} {'factor':>7}  description")
    for name in sorted(info):
        entry = info[name]
        click.echo(f"{name:<10} {entry['support']:>8g} {entry['factor']:>7g}  {entry['description']}")


__all__ = ["resize_image", "list_filters", "target_size"]
