from __future__ import annotations

import logging
import pathlib
from typing import Optional

import typer
import structlog
from rich.console import Console
from rich.table import Table

from .config import load_config, IdCheckConfig
from .check.registry import RuleRegistry
from .currency import convert_locale_number
from .engine.dispatcher import ValidationDispatcher
from .exceptions import LocaleNumberError, RuleConfigError
from .models import Jurisdiction, Outcome, ValidationOutcome, ValidationRequest

console = Console()
log = structlog.get_logger()
app = typer.Typer(add_completion=False, no_args_is_help=True, help="idcheck: ID number and check-digit validator")

EXIT_INVALID = 1
EXIT_CONFIG = 2


def version_callback(value: bool):
    if value:
        from . import __version__
        console.print(f"idcheck {__version__}")
        raise typer.Exit()


@app.callback()
def common(
    ctx: typer.Context,
    config: Optional[pathlib.Path] = typer.Option(None, "--config", help="Path to idcheck.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logs"),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True),
):
    """Global options (config, verbosity)."""
    try:
        cfg = load_config(config) if config else IdCheckConfig()
    except (OSError, RuleConfigError) as e:
        console.print(f"[red]Bad config:[/red] {e}")
        raise typer.Exit(code=EXIT_CONFIG)

    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level.upper())
    structlog.configure(
        processors=[structlog.processors.add_log_level, structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    ctx.obj = {"config": cfg}
    if verbose:
        log.info("verbose_enabled")


def _registry(ctx: typer.Context) -> RuleRegistry:
    cfg: IdCheckConfig = ctx.obj["config"]
    try:
        return RuleRegistry.from_config(cfg)
    except (OSError, RuleConfigError) as e:
        console.print(f"[red]Bad rule configuration:[/red] {e}")
        raise typer.Exit(code=EXIT_CONFIG)


@app.command()
def validate(
    ctx: typer.Context,
    jurisdiction: str = typer.Argument(..., help="BR, CA or US"),
    domain: str = typer.Argument(..., help="personal, company, bank, vehicle or currency"),
    field: str = typer.Argument(..., help="Field name, e.g. cpf"),
    value: str = typer.Argument(..., help="Value to check (formatting allowed)"),
    region: Optional[str] = typer.Option(None, "--region", "-r", help="State/province code for regional fields"),
):
    """Validate one value. Exit code 0 when valid, 1 otherwise."""
    try:
        request = ValidationRequest.build(jurisdiction, domain, field, value, region)
    except ValueError:
        outcome = ValidationOutcome(Outcome.unknown_rule)
    else:
        outcome = ValidationDispatcher(_registry(ctx)).validate(request)

    if outcome.valid:
        console.print(f"[green]valid[/green] {outcome.normalized}")
        return
    console.print(f"[red]{outcome.kind.value}[/red]")
    raise typer.Exit(code=EXIT_INVALID)


@app.command()
def rules(
    ctx: typer.Context,
    jurisdiction: Optional[Jurisdiction] = typer.Option(None, "--jurisdiction", "-j", case_sensitive=False),
):
    """List registered rules."""
    registry = _registry(ctx)
    table = Table(title="Registered rules")
    table.add_column("Rule", no_wrap=True)
    table.add_column("Normalize")
    table.add_column("Pattern")
    table.add_column("Checksum")
    for rule in registry.rules(jurisdiction):
        if rule.regional:
            pattern = f"by region ({len(registry.regions(rule.key))})"
        else:
            pattern = rule.pattern.describe()
        table.add_row(str(rule.key), rule.normalization.value, pattern, rule.checksum.kind)
    console.print(table)


@app.command()
def convert(
    value: str = typer.Argument(..., help="Locale-formatted number, e.g. 'R$ 1.234,56'"),
    jurisdiction: Jurisdiction = typer.Option(Jurisdiction.BR, "--jurisdiction", "-j", case_sensitive=False),
):
    """Convert a locale-formatted number to a plain decimal."""
    try:
        number = convert_locale_number(value, jurisdiction)
    except LocaleNumberError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=EXIT_INVALID)
    console.print(repr(number))
