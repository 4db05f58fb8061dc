import sys

import click
import yaml

from . import applier, ips, rom_utils
from .errors import IpsError


class PatchGroup(click.Group):
    """Command group that falls back to `apply` when no subcommand is named."""

    default_command = "apply"

    def parse_args(self, ctx, args):
        if args and args[0] not in self.commands and not args[0].startswith("-"):
            args.insert(0, self.default_command)
        return super().parse_args(ctx, args)


@click.group(cls=PatchGroup)
def main():
    """ips-patch: IPS patch tool.

    `ips-patch FILE < in > out` is shorthand for `ips-patch apply FILE`.
    """
    pass


@main.command()
@click.argument("patch_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--rom", type=click.Path(exists=True, dir_okay=False), default=None, help="Data to patch (default: stdin)")
@click.option("--out", type=click.Path(dir_okay=False), default=None, help="Where to write the patched data (default: stdout)")
@click.option("--verbose", "-v", is_flag=True, help="Report record count and CRC32 checksums on stderr")
def apply(patch_file, rom, out, verbose):
    """Apply PATCH_FILE to data read from stdin, write the result to stdout."""
    try:
        patch = ips.load_patch(patch_file)
        if rom:
            data = rom_utils.read_rom_bytes(rom)
        else:
            data = rom_utils.read_stream_bytes(sys.stdin.buffer)
        patched = applier.apply_patch(patch, data)
        if out:
            rom_utils.write_rom_bytes(out, patched)
        else:
            rom_utils.write_stream_bytes(sys.stdout.buffer, patched)
    except (IpsError, OSError) as e:
        raise click.ClickException(str(e))

    if verbose:
        click.echo(f"Records: {len(patch)}", err=True)
        click.echo(f"Input:  {len(data)} bytes, CRC32 {rom_utils.crc32(data):08X}", err=True)
        click.echo(f"Output: {len(patched)} bytes, CRC32 {rom_utils.crc32(patched):08X}", err=True)
        if out:
            click.echo(f"Wrote patched data → {out}", err=True)


@main.command()
@click.argument("patch_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yaml", "as_yaml", is_flag=True, help="Emit the record list as YAML")
def inspect(patch_file, as_yaml):
    """List the records of PATCH_FILE in file order."""
    try:
        patch = ips.load_patch(patch_file)
    except (IpsError, OSError) as e:
        raise click.ClickException(str(e))

    rows = ips.describe_records(patch)
    if as_yaml:
        click.echo(yaml.safe_dump({"patch": str(patch_file), "records": rows}, sort_keys=False), nl=False)
        return
    for r in rows:
        if r["type"] == "rle":
            click.echo(f"RLE  : offset=0x{r['offset']:06X} size=0x{r['size']:04X} value=0x{r['value']:02X}")
        else:
            click.echo(f"DATA : offset=0x{r['offset']:06X} size=0x{r['size']:04X}")
    click.echo(f"{len(rows)} record(s)")


if __name__ == "__main__":
    main()
