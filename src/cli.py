"""Command line validator for review policy files, using Typer."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from src.core.errors import ConfigurationError
from src.rules.loaders.github_loader import parse_policy

app = typer.Typer(
    name="approvalgate-validate",
    help="Validate a review policy file before committing it",
    no_args_is_help=True,
)

console = Console(soft_wrap=True)


@app.command()
def validate(
    path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Policy file to validate (YAML or JSON)",
    ),
) -> None:
    """Parse the policy file, check it against the policy schema and compile its regular expressions."""
    console.print(f"Looking for policy in {escape(str(path))}")
    try:
        policy = parse_policy(path.read_text(encoding="utf-8"), source=str(path))
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    for rule in policy.rules:
        console.print(f"- {escape(rule.name)} ({rule.type})")
    plural = "s" if len(policy.rules) != 1 else ""
    console.print(f"[green]Policy is valid![/green] {len(policy.rules)} rule{plural} found")


if __name__ == "__main__":
    app()
