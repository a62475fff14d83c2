"""ratcalc CLI entry point."""

import click


@click.group()
def cli():
    """ratcalc: exact rational expression calculator."""
    pass


# Register subcommands
from ratcalc.cli.expr_cmd import eval_cmd, repl, rules  # noqa: E402

cli.add_command(eval_cmd)
cli.add_command(repl)
cli.add_command(rules)
