import sys
from typing import Any, List, Tuple

from ape.utils import ZERO_ADDRESS


def _abort() -> None:
    print("Aborting deployment!")
    sys.exit(-1)


def _confirm(prompt: str) -> None:
    answer = input(prompt)
    if answer.lower().strip() == "n":
        _abort()


def _confirm_deployment(contract_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    _confirm(f"Deploy {contract_name} Y/N? ")


def _continue() -> None:
    """Asks the user to continue."""
    _confirm("Continue Y/N? ")


def _confirm_zero_address() -> None:
    _confirm("Zero Address detected for deployment parameter; Continue? Y/N? ")


def _confirm_resolution(named_args: List[Tuple[str, Any]], contract_name: str) -> None:
    """Asks the user to confirm the resolved initializer parameters for a single contract."""
    if len(named_args) == 0:
        print(f"\n(i) No initializer parameters for {contract_name}")
        _confirm_deployment(contract_name)
        return

    print(f"\nInitializer parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in named_args:
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = resolved_value == ZERO_ADDRESS
    _confirm_deployment(contract_name)
    if contains_zero_address:
        _confirm_zero_address()


def _confirm_upgrade(proxy_address: str, contract_name: str) -> None:
    """Asks the user to confirm pointing a proxy at a new implementation."""
    _confirm(f"Upgrade proxy at {proxy_address} to {contract_name} Y/N? ")
