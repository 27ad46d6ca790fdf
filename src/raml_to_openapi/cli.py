"""CLI entry point for raml-to-openapi."""

import logging
from pathlib import Path

import click

from raml_to_openapi.converter import RamlConverter, conversion_stats
from raml_to_openapi.detect import find_raml_files, validate_raml_file
from raml_to_openapi.errors import ConversionError, StrictModeError
from raml_to_openapi.raml.reader import read_raml
from raml_to_openapi.writer import detect_output_format, output_file_name, write_document


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _input_files(input_path: Path, recursive: bool) -> list[Path]:
    if input_path.is_dir():
        files = find_raml_files(input_path, recursive=recursive)
        if not files:
            raise click.ClickException(f"No RAML 1.0 files found in {input_path}")
        return files
    validate_raml_file(input_path)
    return [input_path]


def _output_path(source: Path, output: Path | None, fmt: str, single: bool) -> Path:
    if output is None:
        return source.with_name(output_file_name(source, fmt))
    if single and output.suffix:
        return output
    return output / output_file_name(source, fmt)


@click.group()
def main():
    """RAML to OpenAPI: convert RAML 1.0 API definitions to OpenAPI 3.0."""
    pass


@main.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file, or directory when converting several files.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "yaml", "json"]), help="Output format.")
@click.option("--strict", is_flag=True, help="Fail when any type, scheme or operation cannot be mapped.")
@click.option("-r", "--recursive", is_flag=True, help="Search input directories recursively.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def convert(input_path: Path, output: Path | None, fmt: str, strict: bool, recursive: bool, verbose: bool):
    """Convert a RAML file, or every RAML file in a directory."""
    _setup_logging(verbose)
    try:
        files = _input_files(input_path, recursive)
    except ConversionError as e:
        raise click.ClickException(str(e)) from e

    single = len(files) == 1 and not input_path.is_dir()
    if fmt == "auto":
        fmt = detect_output_format(output) if single and output is not None else "yaml"

    click.echo(f"Converting {len(files)} RAML file(s)...")
    converter = RamlConverter(strict=strict)
    failed = 0

    # each file is written as soon as it converts; failures are reported at the end
    for source in files:
        try:
            document = converter.convert_file(source)
        except StrictModeError as e:
            failed += 1
            click.echo(f"  {source.name}: Strict mode conversion failed.\n{e}", err=True)
            continue
        except ConversionError as e:
            failed += 1
            click.echo(f"  {source.name}: {e}", err=True)
            continue

        target = write_document(document, _output_path(source, output, fmt, single), fmt)
        stats = conversion_stats(document)
        click.echo(
            f"  {source.name} -> {target} "
            f"({stats['paths']} paths, {stats['operations']} operations, {stats['schemas']} schemas)"
        )

    if failed:
        raise click.ClickException(f"{failed} of {len(files)} file(s) failed to convert")
    click.echo(f"Done! Converted {len(files)} file(s).")


@main.command()
@click.argument("input_path", type=click.Path(exists=True, path_type=Path))
def validate(input_path: Path):
    """Check that a file is readable RAML 1.0."""
    try:
        validate_raml_file(input_path)
        document = read_raml(input_path)
    except ConversionError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{input_path} is valid RAML 1.0: {document.title or 'untitled'}")
    click.echo(
        f"  {len(document.types)} types, {len(document.resources)} top-level resources, "
        f"{len(document.security_schemes)} security schemes"
    )
