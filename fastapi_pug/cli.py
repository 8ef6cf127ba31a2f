"""Main CLI application."""

import logging

import typer

from fastapi_pug.commands.make_pug import make_pug

app = typer.Typer(
    name="fastapi-pug",
    help="Developer commands for Pug views in FastAPI projects.",
    no_args_is_help=True,
)

app.command("make:pug")(make_pug)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
