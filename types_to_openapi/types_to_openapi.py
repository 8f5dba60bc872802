import json
import logging
import os
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line, split_paths, split_type_names
from .errors import TypesToOpenApiError
from .pipeline import AtomicWriter, GeneratorConfig, create_generator, render_redoc_html


def _load_json(path):
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except ValueError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}") from e


@click.command()
@click.option(
    "--options-file",
    "-p",
    default=None,
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="JSON file with generator options",
)
@click.option(
    "--spec-file",
    "-s",
    default=None,
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="JSON file with additional OpenAPI fields (info, servers, tags, ...)",
)
@click.option(
    "--schema-only",
    "-e",
    is_flag=True,
    default=False,
    help="Only generate schemas for the given types (--spec-file is ignored)",
)
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False, resolve_path=True))
@click.option("--html", is_flag=True, default=False, help="Render the document as a ReDoc HTML page")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("file_paths", type=str)
@click.argument("type_names", type=str)
def types_to_openapi(options_file, spec_file, schema_only, output, html, verbose, file_paths, type_names):
    """Generate OpenAPI documents from the types declared in FILE_PATHS.

    FILE_PATHS and TYPE_NAMES are comma-separated; a type name written as
    /pattern/ is a regular expression.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if html and schema_only:
        raise click.UsageError("--html cannot be combined with --schema-only")

    options = _load_json(options_file) if options_file is not None else {}

    try:
        config = GeneratorConfig.from_dict(options)
        generator = create_generator(split_paths(file_paths), config, working_dir=os.getcwd())
        names = split_type_names(type_names)

        if schema_only:
            result = generator.get_schemas(names)
        else:
            spec_data = _load_json(spec_file) if spec_file is not None else {}
            result = generator.get_openapi_spec(names, spec_data)
            result["info"]["x-generated-by"] = reconstruct_command_line(types_to_openapi)
    except TypesToOpenApiError as e:
        raise click.ClickException(str(e)) from e

    if html:
        content, fmt = render_redoc_html(result), "html"
    else:
        content, fmt = json.dumps(result, indent=2), "json"

    if output is None:
        click.echo(content)
        return

    try:
        AtomicWriter().write(Path(output), content + "\n", fmt)
    except (TypesToOpenApiError, OSError) as e:
        raise click.ClickException(f"Cannot write {output}: {e}") from e
