"""
atlasmith CLI - Command-line interface for packing texture atlases
"""

import logging
import sys

import click
from pydantic import ValidationError

from atlasmith import __version__
from atlasmith.client import AtlasGenerator
from atlasmith.exceptions import LayoutInfeasibleError, ManifestError
from atlasmith.texturing.layout import plan_grid


def _parse_size(value: str):
    parts = value.lower().split('x')
    try:
        if len(parts) == 1:
            edge = int(parts[0])
            return edge, edge
        if len(parts) == 2:
            return int(parts[0]), int(parts[1])
    except ValueError:
        pass
    raise click.BadParameter(f"Expected WIDTHxHEIGHT or EDGE, got '{value}'")


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    atlasmith - Pack textures into atlases and remap mesh UVs.

    Examples:
        atlasmith pack scene.json -o out/
        atlasmith plan 5 --size 64x64 --max-size 512
    """
    pass


@cli.command()
@click.argument('manifest')
@click.option('-o', '--output', required=True, help='Output directory for atlases and UV table')
@click.option('--name', default='Atlas', show_default=True, help='File name prefix')
@click.option('--max-size', type=int, default=None, help='Maximum atlas size in pixels (default: 2048)')
@click.option('--padding', type=int, default=None, help='Padding around each cell in pixels (default: 1)')
@click.option('--no-tint', is_flag=True, help='Do not bake material colors into the diffuse atlas')
@click.option('--normals', is_flag=True, help='Also build a normal-map atlas')
@click.option('--workers', type=int, default=None, help='Compositing threads')
@click.option('--overwrite', is_flag=True, help='Replace existing atlas files in the output directory')
@click.option('--verbose', '-v', is_flag=True, help='Show detailed packing info')
def pack(manifest, output, name, max_size, padding, no_tint, normals, workers, overwrite, verbose):
    """
    Pack the textures listed in a manifest into an atlas.

    Examples:
        atlasmith pack scene.json -o out/
        atlasmith pack scene.json -o out/ --max-size 1024 --padding 2 --normals
    """
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    overrides = {}
    if max_size is not None:
        overrides['max_atlas_size'] = max_size
    if padding is not None:
        overrides['padding'] = padding
    if no_tint:
        overrides['apply_tint'] = False
    if normals:
        overrides['enable_normal_atlasing'] = True
    if workers is not None:
        overrides['max_workers'] = workers

    try:
        if verbose:
            click.echo(f"Packing: {manifest}")

        result = AtlasGenerator().generate_from_manifest(manifest, overrides=overrides)

        if result.is_empty:
            click.secho("Nothing to do: manifest has no renderers", fg='yellow')
            return

        written = result.save(output, name=name, overwrite=overwrite)

        for warning in result.warnings:
            click.secho(f"Warning: {warning.message}", fg='yellow')

        if verbose:
            layout = result.atlas.layout
            click.echo("\nAtlas:")
            click.echo(f"  Grid: {layout.rows} rows x {layout.columns} columns")
            click.echo(f"  Cell size: {layout.cell_size}px (padding {layout.padding})")
            click.echo(f"  Resolution: {layout.width}x{layout.height}")
            click.echo(f"  Entries: {len(result.atlas.entries)}")
            click.echo(f"  Meshes remapped: {len(result.atlas.assignments)}")
            for path in written:
                click.echo(f"  Wrote: {path}")

        click.secho(f"✓ Success! Atlas saved to {output}", fg='green')

    except ManifestError as e:
        click.secho(f"Manifest Error: {e}", fg='red', err=True)
        sys.exit(1)
    except LayoutInfeasibleError as e:
        click.secho(f"Layout Error: {e}", fg='red', err=True)
        sys.exit(1)
    except FileExistsError as e:
        click.secho(f"Output Error: {e}", fg='red', err=True)
        sys.exit(1)
    except ValidationError as e:
        click.secho(f"Invalid settings: {e}", fg='red', err=True)
        sys.exit(1)
    except Exception as e:
        click.secho(f"Unexpected error: {e}", fg='red', err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.argument('count', type=int)
@click.option('--size', 'sizes', multiple=True, default=('64',), show_default=True,
              help='Native texture size (WxH or EDGE); repeat for several textures')
@click.option('--max-size', type=int, default=2048, show_default=True, help='Maximum atlas size in pixels')
@click.option('--padding', type=int, default=1, show_default=True, help='Padding around each cell in pixels')
def plan(count, sizes, max_size, padding):
    """
    Show the grid chosen for COUNT textures without compositing anything.

    Examples:
        atlasmith plan 4 --size 64x64 --max-size 512 --padding 2
        atlasmith plan 12 --size 1024 --size 512x256
    """
    try:
        native_sizes = [_parse_size(s) for s in sizes]
        layout = plan_grid(count, native_sizes, max_size, padding)
    except LayoutInfeasibleError as e:
        click.secho(f"Layout Error: {e}", fg='red', err=True)
        sys.exit(1)
    except ValueError as e:
        click.secho(f"Error: {e}", fg='red', err=True)
        sys.exit(1)

    click.echo(f"Rows: {layout.rows}")
    click.echo(f"Columns: {layout.columns}")
    click.echo(f"Cell size: {layout.cell_size}")
    click.echo(f"Waste: {layout.capacity - count}")
    click.echo(f"Atlas: {layout.width}x{layout.height}")


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
