"""Expression CLI commands: eval, repl, rules."""

import logging
from pathlib import Path

import click

from ratcalc.arithmetic import format_decimal, format_rational
from ratcalc.config import Settings
from ratcalc.errors import CalcError, CheckError, ParseError, SolveError
from ratcalc.fixer import FixRule
from ratcalc.solver import evaluate
from ratcalc.validator import CheckRule

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit"})


def _evaluation_options(func):
    """Options shared by the commands that evaluate expressions."""
    options = [
        click.option(
            "--fix",
            "fix_names",
            multiple=True,
            type=click.Choice([rule.value for rule in FixRule]),
            help="Fix rule to apply (repeatable).",
        ),
        click.option(
            "--deny",
            "deny_names",
            multiple=True,
            type=click.Choice([rule.value.removeprefix("deny-") for rule in CheckRule]),
            help="Deny an operator or pattern (repeatable), e.g. --deny division.",
        ),
        click.option(
            "--decimal/--no-decimal",
            default=None,
            help="Also print the result as a decimal.",
        ),
        click.option(
            "--precision",
            type=click.IntRange(min=0),
            default=None,
            help="Fractional digits of the decimal output.",
        ),
        click.option(
            "--config",
            "config_path",
            default=None,
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="YAML settings file.",
        ),
        click.option(
            "--log-level",
            default=None,
            type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
            help="Logging level.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_settings(
    fix_names: tuple[str, ...],
    deny_names: tuple[str, ...],
    decimal: bool | None,
    precision: int | None,
    config_path: Path | None,
    log_level: str | None,
) -> Settings:
    """Resolve settings: environment, then config file, then flags."""
    try:
        settings = Settings.from_env()
        if config_path is not None:
            settings = Settings.from_file(config_path, settings)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"Error: invalid settings: {e}", fg="red"), err=True)
        raise SystemExit(1)

    overrides: dict = {}
    if fix_names:
        overrides["fix_rules"] = fix_names
    if deny_names:
        overrides["check_rules"] = [f"deny-{name}" for name in deny_names]
    if decimal is not None:
        overrides["decimal"] = decimal
    if precision is not None:
        overrides["precision"] = precision
    if log_level is not None:
        overrides["log_level"] = log_level
    settings = Settings.from_mapping(overrides, settings)

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
    logger.debug(
        "Settings: fix=%s check=%s decimal=%s precision=%d",
        sorted(rule.value for rule in settings.fix_rules),
        sorted(rule.value for rule in settings.check_rules),
        settings.decimal,
        settings.precision,
    )
    return settings


def _error_label(error: CalcError) -> str:
    if isinstance(error, ParseError):
        return "Parse error"
    if isinstance(error, CheckError):
        return "Check error"
    if isinstance(error, SolveError):
        return "Solve error"
    return "Error"


def _render(value, settings: Settings) -> str:
    text = format_rational(value)
    if settings.decimal and value.denominator != 1:
        text += f" ≈ {format_decimal(value, settings.precision)}"
    return text


def _run(expression: str, settings: Settings) -> str | None:
    """Evaluate one expression, echoing errors; returns the rendered result."""
    try:
        result = evaluate(expression, settings.fix_rules, settings.check_rules)
    except CalcError as e:
        click.echo(click.style(f"{_error_label(e)}: {e}", fg="red"), err=True)
        return None
    return _render(result, settings)


@click.command("eval", context_settings={"ignore_unknown_options": True})
@click.argument("expression", nargs=-1, required=True)
@_evaluation_options
def eval_cmd(expression, fix_names, deny_names, decimal, precision, config_path, log_level):
    """Evaluate EXPRESSION and print the exact result.

    Words are joined with spaces, so quoting is optional:

        ratcalc eval 12 + 34 '*' 45

        ratcalc eval --fix block-product -- "-(2)(3)"
    """
    settings = _resolve_settings(
        fix_names, deny_names, decimal, precision, config_path, log_level
    )
    rendered = _run(" ".join(expression), settings)
    if rendered is None:
        raise SystemExit(1)
    click.echo(rendered)


@click.command()
@_evaluation_options
def repl(fix_names, deny_names, decimal, precision, config_path, log_level):
    """Interactive shell: evaluate one expression per line.

    Type 'exit' or 'quit' (or send EOF) to leave.
    """
    settings = _resolve_settings(
        fix_names, deny_names, decimal, precision, config_path, log_level
    )
    while True:
        try:
            line = click.prompt(">", default="", show_default=False, prompt_suffix=" ")
        except click.Abort:
            click.echo()
            break

        line = line.strip()
        if not line:
            continue
        if line.split()[0].lower() in EXIT_COMMANDS:
            break

        rendered = _run(line, settings)
        if rendered is not None:
            click.echo(click.style(f"Solution: {rendered}", fg="green"))


@click.command()
def rules():
    """List the available fix and check rules."""
    click.echo(click.style("Fix rules (--fix):", bold=True))
    for rule in FixRule:
        click.echo(f"  {rule.value}")
    click.echo(click.style("Check rules (--deny):", bold=True))
    for rule in CheckRule:
        click.echo(f"  {rule.value.removeprefix('deny-')}")
