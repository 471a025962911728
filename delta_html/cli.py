"""
Renders a Quill-style delta file to HTML or plain text.
The result is printed to stdout, or written to the file given with --output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, build_config
from .engine import DeltaRenderer
from .exceptions import DeltaError
from .filesystem import get_max_file_size, read_delta_file, resolve_delta_path, write_output

__all__ = ["cli"]


def parse_token_specs(specs: tuple[str, ...]) -> dict | None:
    """Turn ``NAME=TEMPLATE`` pairs into a partial token table.

    Dotted names address nested templates (``script.sub``, ``list.item``)
    and header levels (``header.2``).

    Raises:
        ValueError: If a pair has no ``=`` or an empty name, or if a key gets
            both a whole template and dotted variants.

    Examples:
        parse_token_specs(("bold=<strong>{content}</strong>", "header.1=<h1 class='t'>{content}</h1>"))
    """
    if not specs:
        return None

    tokens: dict = {}
    for spec in specs:
        name, separator, template = spec.partition("=")
        name = name.strip()
        if not separator or not name:
            raise ValueError(f"Invalid token override {spec!r} (expected NAME=TEMPLATE)")

        key, _, variant = name.partition(".")
        previous = tokens.get(key)
        if variant:
            if isinstance(previous, str):
                raise ValueError(f"Token override {spec!r} conflicts with the template given for `{key}`")
            tokens.setdefault(key, {})[variant] = template
        else:
            if isinstance(previous, dict):
                raise ValueError(f"Token override {spec!r} conflicts with the `{key}.*` overrides")
            tokens[key] = template
    return tokens


@click.command()
@click.version_option(package_name="delta-html")
@click.option("--plain-text", is_flag=True, help="Output plain text instead of HTML")
@click.option("--wrap-lines/--no-wrap-lines", default=None, help="Wrap lines in the line template")
@click.option("--strict/--lenient", default=None, help="Fail on malformed attribute values")
@click.option(
    "--token",
    "token_specs",
    multiple=True,
    metavar="NAME=TEMPLATE",
    help="Override a token template (repeatable)",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write the result to a file")
@click.option("--verbose", is_flag=True, help="Log rendering details to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    plain_text: bool = False,
    wrap_lines: bool | None = None,
    strict: bool | None = None,
    token_specs: tuple[str, ...] = (),
    output: str | None = None,
    verbose: bool = False,
):
    """
    Entry point for rendering a delta file.

    Args:
        filepath: Path to the JSON delta file to render.
        plain_text: Output text with all markup removed.
        wrap_lines: Override for wrapping lines in the line template.
        strict: Override for failing on malformed attribute values.
        token_specs: Token template overrides as ``NAME=TEMPLATE`` pairs.
        output: Optional file receiving the result instead of stdout.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path, the token overrides or the
            configuration are invalid.
        click.ClickException: If the file cannot be read, is too large, or
            holds a malformed delta, or if the output cannot be written.

    Examples:
        delta-html post.json --no-wrap-lines --token "bold=<strong>{content}</strong>"
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_delta_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        tokens = parse_token_specs(token_specs)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(filepath.parent, wrap_lines=wrap_lines, strict=strict, tokens=tokens)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        content = read_delta_file(filepath, max_file_size)
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        renderer = DeltaRenderer(content, config).parse()
    except DeltaError as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    result = renderer.to_plain_text() if plain_text else renderer.to_html()

    if output is None:
        click.echo(result, nl=False)
        return

    try:
        write_output(Path(output).expanduser(), result)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
