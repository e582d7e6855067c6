#!/usr/bin/env python3
"""
PixelFX - Image Transformation CLI

Applies grayscale, blur and edge detection to image files, writing PNG
output or printing the result as a data-URL payload.
"""

import click
import sys
import platform
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pixelfx import __version__
from pixelfx.api import initialize
from pixelfx.core.codec import encode_payload
from pixelfx.core.errors import ImageProcessingError
from pixelfx.core.pipeline import ImagePipeline
from pixelfx.utils.config import Config, OVERFLOW_POLICIES
from pixelfx.utils.logging import get_logger, set_package_level

# Status output goes to stderr so --data-url output can be piped
console = Console(stderr=True)
logger = get_logger(__name__)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Path to configuration file')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False),
              help='Directory for results when OUTPUT is omitted')
@click.pass_context
def cli(ctx, config, output_dir):
    """
    PixelFX - Image Transformation Operations

    Grayscale conversion, Gaussian blur and gradient edge detection for
    image files.
    """
    if config:
        ctx.obj = Config.load(config)
        console.print(f"[green]Loaded configuration from {config}[/green]")
    else:
        ctx.obj = Config()

    if output_dir:
        ctx.obj.update(output_dir=output_dir)

    initialize()
    set_package_level(ctx.obj.log_level)


def _resolve_output(config: Config, input_path: Path, output: Optional[str], operation: str) -> Path:
    if output:
        return Path(output)
    directory = config.output_dir or input_path.parent
    return directory / f"{input_path.stem}_{operation}.png"


def _run(config: Config, operation: str, input_path: str, output: Optional[str],
         data_url: bool, **params) -> None:
    if data_url:
        # Keep stdout clean for the payload
        set_package_level("WARNING")

    input_path = Path(input_path)
    pipeline = ImagePipeline(config)

    try:
        result = pipeline.run_bytes(operation, input_path.read_bytes(), **params)
    except ImageProcessingError as e:
        logger.error(f"CLI {operation} failed: {e}")
        raise click.ClickException(str(e))

    if data_url:
        click.echo(encode_payload(result, config.output_mime))
        if not output:
            return

    output_path = _resolve_output(config, input_path, output, operation)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result)

    console.print(f"[green][OK] {operation} written to {output_path}[/green]")


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('output', required=False, type=click.Path(dir_okay=False))
@click.option('--data-url', is_flag=True,
              help='Print the result as a data URL')
@click.pass_obj
def grayscale(config, input_path, output, data_url):
    """Convert an image to grayscale."""
    _run(config, 'grayscale', input_path, output, data_url)


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('output', required=False, type=click.Path(dir_okay=False))
@click.option('--sigma', '-s', type=float, default=None,
              help='Gaussian standard deviation in pixels (default from config)')
@click.option('--data-url', is_flag=True,
              help='Print the result as a data URL')
@click.pass_obj
def blur(config, input_path, output, sigma, data_url):
    """Apply a Gaussian blur."""
    _run(config, 'blur', input_path, output, data_url, sigma=sigma)


@cli.command()
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('output', required=False, type=click.Path(dir_okay=False))
@click.option('--overflow', type=click.Choice(OVERFLOW_POLICIES), default=None,
              help='How gradient magnitudes above 255 are narrowed')
@click.option('--data-url', is_flag=True,
              help='Print the result as a data URL')
@click.pass_obj
def edges(config, input_path, output, overflow, data_url):
    """Detect edges with the gradient-magnitude operator."""
    if overflow:
        config.update(overflow_policy=overflow)
    _run(config, 'edges', input_path, output, data_url)


@cli.command()
@click.pass_obj
def info(config):
    """Display library versions and the active configuration."""
    import numpy as np
    import PIL

    info_text = Text()
    info_text.append("System Information\n\n", style="bold cyan")

    info_text.append("PixelFX: ", style="white")
    info_text.append(f"{__version__}\n", style="green")

    info_text.append("Python: ", style="white")
    info_text.append(f"{sys.version.split()[0]}\n", style="green")

    info_text.append("Platform: ", style="white")
    info_text.append(f"{platform.platform()}\n", style="green")

    info_text.append("NumPy: ", style="white")
    info_text.append(f"{np.__version__}\n", style="green")

    info_text.append("Pillow: ", style="white")
    info_text.append(f"{PIL.__version__}\n", style="green")

    console.print(Panel(info_text, title="PixelFX", border_style="cyan"))

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in config.to_dict().items():
        table.add_row(key, str(value))

    console.print(table)


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[red]Error: {e}[/red]")
        logger.error(f"CLI error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
