from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import SOURCE_ENVVAR, templates_root
from .deploy import DeployOptions, DeployReport, GitStatus, deploy_template, resolve_destination
from .errors import ConfigError, CopyError, DeployError, GitError, TemplateError

app = typer.Typer(
    help="Deploy the Cursor template to a target directory.",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)
console = Console()

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

COMMAND = "deploy"

ERROR_CODES = (
    (TemplateError, "template_error"),
    (ConfigError, "config_error"),
    (CopyError, "copy_error"),
    (GitError, "git_error"),
)

LEVEL_STYLES = {
    "INFO": "blue",
    "SUCCESS": "green",
    "WARNING": "yellow",
    "ERROR": "red",
}


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    md = "md"


def _json_print(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=True, sort_keys=True))


def _say(level: str, message: str) -> None:
    style = LEVEL_STYLES[level]
    console.print(f"[{style}]{escape(f'[{level}]')}[/{style}] {escape(message)}", soft_wrap=True)


def _configure_logging(verbosity: int) -> None:
    # 0 -> WARNING, 1 -> INFO, 2+ -> DEBUG; diagnostics go to stderr.
    level = (logging.WARNING, logging.INFO, logging.DEBUG)[min(max(verbosity, 0), 2)]
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _ask_overwrite() -> bool:
    # Anything but y/Y, including an empty answer or closed stdin, declines.
    try:
        reply = typer.prompt(
            "Do you want to continue and overwrite existing files? (y/N)",
            default="",
            show_default=False,
        )
    except typer.Abort:
        typer.echo()
        return False
    return reply.strip()[:1] in ("y", "Y")


def _error_code(error: DeployError) -> str:
    for error_type, code in ERROR_CODES:
        if isinstance(error, error_type):
            return code
    return "deploy_error"


def _emit_success(
    output_format: OutputFormat,
    data: dict,
    md_renderer: Callable[[dict], str],
    table_renderer: Callable[[dict], None],
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": True,
                "command": COMMAND,
                "exit_code": EXIT_OK,
                "data": data,
            }
        )
    elif output_format == OutputFormat.md:
        console.print(md_renderer(data), markup=False, soft_wrap=True)
    else:
        table_renderer(data)


def _emit_error(output_format: OutputFormat, exit_code: int, code: str, message: str) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": False,
                "command": COMMAND,
                "exit_code": exit_code,
                "error": {
                    "code": code,
                    "message": message,
                },
            }
        )
    elif output_format == OutputFormat.md:
        console.print(
            f"# {COMMAND}\n\n- **status**: error\n- **code**: {code}\n- **message**: {message}",
            markup=False,
        )
    else:
        _say("ERROR", message)

    raise typer.Exit(code=exit_code)


def _next_steps(payload: dict) -> list[str]:
    steps = [
        f"cd {payload['destination']}",
        "Review and customize the .cursor/rules/ files",
        "Add your project files",
    ]
    if payload["git"] != GitStatus.skipped.value:
        steps.append("git add . && git commit -m 'Initial commit'")
    return steps


def _report_data(report: DeployReport) -> dict:
    return {
        "source": str(report.source_root),
        "destination": str(report.destination),
        "created": report.created,
        "cancelled": report.cancelled,
        "copied": list(report.copied),
        "git": report.git.value,
    }


def _render_md(payload: dict) -> str:
    if payload["cancelled"]:
        return f"# Deployment cancelled\n\n- **destination**: `{payload['destination']}`"

    lines = ["# Deployment complete", ""]
    lines.append(f"- **source**: `{payload['source']}`")
    lines.append(f"- **destination**: `{payload['destination']}`")
    lines.append(f"- **created**: {payload['created']}")
    lines.append(f"- **git**: {payload['git']}")
    lines.append("\n## Copied")
    lines.extend(f"- `{item}`" for item in payload["copied"])
    lines.append("\n## Next steps")
    lines.extend(f"{index}. {step}" for index, step in enumerate(_next_steps(payload), start=1))
    return "\n".join(lines)


def _render_table(payload: dict) -> None:
    if payload["cancelled"]:
        _say("INFO", "Deployment cancelled")
        return

    for item in payload["copied"]:
        _say("SUCCESS", f"Copied {item}")

    if payload["git"] == GitStatus.initialized.value:
        _say("SUCCESS", "Git repository initialized")
    elif payload["git"] == GitStatus.exists.value:
        _say("INFO", "Git repository already exists - skipping initialization")

    console.print()
    _say("SUCCESS", "Deployment complete!")
    console.print()

    table = Table(title="Deployment summary")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("destination", payload["destination"])
    table.add_row("source", payload["source"])
    table.add_row("copied", ", ".join(payload["copied"]) if payload["copied"] else "-")
    table.add_row("git", payload["git"])
    console.print(table)

    console.print()
    console.print("Next steps:")
    for index, step in enumerate(_next_steps(payload), start=1):
        console.print(f"  {index}. {escape(step)}", soft_wrap=True)
    console.print()
    _say("INFO", "Happy coding!")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command()
def deploy(
    destination: str = typer.Argument(..., help="Path to the target directory."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing files without prompting."),
    no_git: bool = typer.Option(False, "--no-git", "-n", help="Don't initialize git repository in target."),
    source: Optional[Path] = typer.Option(
        None,
        "--source",
        "-s",
        envvar=SOURCE_ENVVAR,
        help="Template root to deploy (defaults to the bundled template).",
    ),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print version and exit.",
    ),
):
    """Copy the template's .cursor/, .cursorignore, README.md and top-level files into DESTINATION."""
    _configure_logging(verbose)

    target = resolve_destination(destination)
    interactive = output_format == OutputFormat.table

    if interactive:
        _say("INFO", f"Deploying Cursor template to: {target}")

    def confirm(path: Path) -> bool:
        if interactive:
            _say("WARNING", "Destination directory already exists")
        return _ask_overwrite()

    if interactive and target.is_dir() and force:
        _say("WARNING", "Destination exists - overwriting files (--force enabled)")
    elif interactive and not target.exists():
        _say("INFO", "Creating destination directory...")

    options = DeployOptions(
        destination=target,
        source_root=source if source is not None else templates_root(),
        force=force,
        init_git=not no_git,
    )
    try:
        report = deploy_template(options, confirm_overwrite=confirm)
    except DeployError as error:
        _emit_error(
            output_format=output_format,
            exit_code=EXIT_ERROR,
            code=_error_code(error),
            message=str(error),
        )
        raise

    _emit_success(
        output_format=output_format,
        data=_report_data(report),
        md_renderer=_render_md,
        table_renderer=_render_table,
    )
