import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from srcpatch.cli.apply import apply, transforms
from srcpatch.cli.find import find_type

app = typer.Typer(
    name="srcpatch",
    help="srcpatch: insert or replace Go declarations, leaving the rest of the file as written.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every transform applied.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("apply")(apply)
app.command("transforms")(transforms)
app.command("find-type")(find_type)


def main() -> None:
    app()
