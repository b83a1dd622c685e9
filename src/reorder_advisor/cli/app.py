import logging
from typing import Annotated

import typer

from reorder_advisor.cli.advise import apply, declarations, propose
from reorder_advisor.cli.serve import serve_app
from reorder_advisor.cli.watch import watch

app = typer.Typer(
    name="reorder-advisor",
    help="Reorder Advisor — suggest better orderings of top-level declarations.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log advisor activity.")] = False,
) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


app.command("declarations")(declarations)
app.command("propose")(propose)
app.command("apply")(apply)
app.command("watch")(watch)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
