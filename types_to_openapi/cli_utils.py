"""
CLI utilities for argument parsing and command line reconstruction.
"""

import re
from pathlib import Path

import click

from .pipeline.analyzer import TypeNamePattern

COMMAND_NAME = "types_to_openapi"


def split_type_names(value: str) -> list[TypeNamePattern]:
    """
    Split a comma-separated list of type names.

    Entries written as ``/pattern/`` become compiled regular expressions.

    Args:
        value: Comma-separated type names

    Returns:
        Exact names and compiled patterns, in the given order
    """
    names: list[TypeNamePattern] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if len(item) > 1 and item.startswith("/") and item.endswith("/"):
            names.append(re.compile(item[1:-1]))
        else:
            names.append(item)
    return names


def split_paths(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return COMMAND_NAME

    if not cli_args:
        return COMMAND_NAME

    cmd_parts = [COMMAND_NAME]
    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if not value:
            continue

        # File paths are shown by name only
        if isinstance(value, (str, Path)):
            formatted_value = ",".join(
                Path(part).name if Path(part).exists() else part for part in str(value).split(",")
            )
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)

        elif isinstance(param, click.Option):
            if value == param.default:
                continue

            flag = param.opts[0] if param.opts else f"--{param_name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, formatted_value])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)

    return " ".join(cmd_parts)
