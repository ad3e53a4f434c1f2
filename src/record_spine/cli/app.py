"""
Root Typer application for the record-spine CLI.
"""

from __future__ import annotations

import json

import typer
from typer import Typer

from record_spine.cli.utils import console, err_console, open_from_options
from record_spine.core.logging import LogContext

app = Typer(
    name="record-spine",
    help="record-spine: inspect a person/address record store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from record_spine import __version__

        typer.echo(f"record-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """record-spine CLI for integrity checks and record inspection."""


@app.command("check")
def check(
    data_dir: str | None = typer.Option(None, "--data-dir", "-d", help="Store root directory."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Scan people and addresses for broken references."""
    stores = open_from_options(data_dir)
    with LogContext(command="check"):
        report = stores.check_integrity()

    if json_out:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        status = "[green]OK[/green]" if report.ok else "[red]BROKEN[/red]"
        console.print(
            f"{status}  people={report.people_scanned} addresses={report.addresses_scanned}"
        )
        for person_id, address_id in report.dangling:
            console.print(f"  dangling  person {person_id} -> address {address_id}")
        for address_id in report.unlinked:
            console.print(f"  unlinked  address {address_id}")
        for address_id in report.orphans:
            console.print(f"  orphan    address {address_id}")
        for kind, record_id in report.corrupt:
            console.print(f"  corrupt   {kind} {record_id}")

    if not report.ok:
        err_console.print("[red]Integrity check failed[/red]")
        raise typer.Exit(code=1)


# ── Sub-command registration ─────────────────────────────────────────────

from record_spine.cli.people import app as people_app  # noqa: E402

app.add_typer(people_app, name="person", help="Inspect people and their addresses.")


if __name__ == "__main__":
    app()
