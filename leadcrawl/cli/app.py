"""Typer application entry point for leadcrawl CLI."""

import typer

from leadcrawl.cli.commands import emails as emails_command
from leadcrawl.cli.commands import linkedin as linkedin_command
from leadcrawl.cli.commands import serve as serve_command

app = typer.Typer(no_args_is_help=True, name="leadcrawl")

app.command(name="emails", help="Find contact emails reachable from websites")(
    emails_command.emails_command
)
app.command(name="linkedin", help="List company LinkedIn URLs on a page")(
    linkedin_command.linkedin_command
)
app.command(name="serve", help="Run the REST API")(serve_command.serve_command)


if __name__ == "__main__":
    app()
