"""propcontract check command - report missing and forbidden defaults."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from propcontract.config.loader import load_config
from propcontract.config.models import PropContractConfig
from propcontract.core.errors import ConfigError
from propcontract.core.logging import configure_logging, set_run_id
from propcontract.core.progress import pluralize, spinner, status
from propcontract.lint.models import LintResult, Severity
from propcontract.lint.ops import LintOps


def _overrides(
    *,
    forbid_default_for_required: bool,
    ignore_functional_components: bool,
    wrappers: tuple[str, ...],
    typed_javascript: bool,
    jobs: int | None,
) -> dict[str, dict[str, object]]:
    """Translate CLI flags into load_config kwargs. Unset flags defer to config files."""
    rule: dict[str, object] = {}
    discovery: dict[str, object] = {}
    if forbid_default_for_required:
        rule["forbid_default_for_required"] = True
    if ignore_functional_components:
        rule["ignore_functional_components"] = True
    if wrappers:
        rule["transparent_wrappers"] = list(wrappers)
    if typed_javascript:
        discovery["typed_javascript"] = True
    if jobs is not None:
        discovery["max_workers"] = jobs

    overrides: dict[str, dict[str, object]] = {}
    if rule:
        overrides["rule"] = rule
    if discovery:
        overrides["discovery"] = discovery
    return overrides


def _print_result(result: LintResult) -> None:
    console = Console(highlight=False, soft_wrap=True)
    for file_result in result.files:
        for d in file_result.diagnostics:
            color = "red" if d.severity == Severity.ERROR else "yellow"
            console.print(
                f"[bold]{escape(d.path)}[/bold]:{d.line}:{d.column} "
                f"[{color}]{d.severity.value}[/{color}] {escape(d.message)} [dim]{d.code}[/dim]"
            )

    skipped = [f for f in result.files if f.status == "skipped"]
    failed = [f for f in result.files if f.status == "error"]
    for f in failed:
        status(f"{f.path}: {f.error_detail}", style="error")

    summary = f"{pluralize(result.total_diagnostics, 'problem')} in {pluralize(len(result.files), 'file')}"
    if skipped:
        summary += f" ({len(skipped)} skipped)"
    status(summary, style="warning" if result.total_diagnostics else "success")


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: .propcontract.yaml in the current directory)",
)
@click.option(
    "--forbid-default-for-required",
    is_flag=True,
    help="Also report required props that declare a default",
)
@click.option(
    "--ignore-functional-components",
    is_flag=True,
    help="Skip function components",
)
@click.option(
    "--wrapper",
    "wrappers",
    multiple=True,
    help="Call unwrapped to its first argument (repeatable)",
)
@click.option(
    "--typed-javascript",
    is_flag=True,
    help="Parse .js/.jsx files with type annotations",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-j", "--jobs", type=click.IntRange(min=1), help="Files checked in parallel")
@click.pass_context
def check_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    config_path: Path | None,
    forbid_default_for_required: bool,
    ignore_functional_components: bool,
    wrappers: tuple[str, ...],
    typed_javascript: bool,
    as_json: bool,
    jobs: int | None,
) -> None:
    """Check that every optional prop has a default.

    PATHS are files or directories (default: current directory).
    """
    root = Path.cwd()
    overrides = _overrides(
        forbid_default_for_required=forbid_default_for_required,
        ignore_functional_components=ignore_functional_components,
        wrappers=wrappers,
        typed_javascript=typed_javascript,
        jobs=jobs,
    )
    try:
        config: PropContractConfig = load_config(root, config_path, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    if not verbose:
        configure_logging(config=config.logging)
    set_run_id()

    ops = LintOps(root, config)
    targets = [str(p) for p in paths] or None
    if as_json:
        result = ops.check(targets)
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        with spinner("Checking components"):
            result = ops.check(targets)
        _print_result(result)

    if result.has_errors:
        ctx.exit(1)
