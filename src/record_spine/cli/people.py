"""
``record-spine person`` commands for inspecting people.
"""

from __future__ import annotations

import json
from uuid import UUID

import typer
from rich.table import Table

from record_spine.cli.utils import console, err_console, open_from_options
from record_spine.core.logging import LogContext

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_person(
    person_id: str = typer.Argument(..., help="Person id (UUID)."),
    data_dir: str | None = typer.Option(None, "--data-dir", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show a person and the addresses they own."""
    try:
        key = UUID(person_id)
    except ValueError:
        err_console.print(f"[red]Not a valid id:[/red] {person_id}")
        raise typer.Exit(code=2)

    stores = open_from_options(data_dir)
    with LogContext(command="person show", person_id=person_id):
        person = stores.people.find(key)
        if person is None:
            err_console.print(f"[red]No person with id[/red] {person_id}")
            raise typer.Exit(code=1)
        addresses = stores.addresses.find_addresses(key)

    if json_out:
        payload = person.model_dump(mode="json")
        payload["addresses"] = [a.model_dump(mode="json") for a in addresses]
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print(f"[bold]{person.name} {person.surname}[/bold]  born {person.birthday.isoformat()}")
    table = Table(title="Addresses")
    table.add_column("id")
    table.add_column("street")
    table.add_column("number")
    table.add_column("apt")
    for address in addresses:
        table.add_row(
            str(address.id),
            address.street_name,
            str(address.house_number),
            address.apartment_number or "",
        )
    console.print(table)
