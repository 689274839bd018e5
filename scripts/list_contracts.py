#!/usr/bin/python3

from itertools import groupby
from typing import List

import click
from ape.cli import ConnectedProviderCommand

from deployment.options import registry_filepath_option
from deployment.registry import RegistryEntry, read_registry
from deployment.utils import get_chain_name


def _format_chain_name(chain_name: str) -> str:
    """Format the chain name to capitalize each word and join with slashes."""
    return "/".join(word.capitalize() for word in chain_name.split())


def _display_registry_entries(entries: List[RegistryEntry]) -> None:
    """Display registry entries grouped by chain ID."""
    entries = sorted(entries, key=lambda e: (e.chain_id, e.name))
    for chain_id, chain_entries in groupby(entries, key=lambda e: e.chain_id):
        chain_name = _format_chain_name(get_chain_name(chain_id))
        click.secho(f"\n{chain_name}", fg="yellow")

        for index, entry in enumerate(chain_entries, start=1):
            click.secho(f"    {index}. {entry.name} {entry.address}", fg="cyan")
            click.secho(f"       implementation {entry.implementation}", fg="white")


@click.command(cls=ConnectedProviderCommand, name="list-contracts")
@registry_filepath_option
def cli(registry_filepath):
    """List all proxied contracts recorded in a deployment registry."""
    _display_registry_entries(read_registry(filepath=registry_filepath))


if __name__ == "__main__":
    cli()
