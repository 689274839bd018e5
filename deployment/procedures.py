import typing

import click

from deployment.confirm import _confirm_resolution, _confirm_upgrade
from deployment.params import DeploymentRequest, UpgradeRequest
from deployment.toolkit import ProxyHandle, ProxyToolkit


def deploy(
    toolkit: ProxyToolkit, request: DeploymentRequest, interactive: bool = False
) -> ProxyHandle:
    """Deploys the requested contract behind a new upgradeable proxy."""
    signer = toolkit.get_signer()
    print(f"Deploying contracts with the account: {signer.address}")

    factory = toolkit.get_contract_factory(request.contract_name)
    print(f"(i) Contract factory loaded: {request.contract_name}")
    if interactive:
        _confirm_resolution(request.named_args(), request.contract_name)

    print(f"Deploying {request.contract_name} contract as a proxy...")
    proxy = toolkit.deploy_proxy(
        factory,
        list(request.constructor_args),
        initializer=request.initializer,
    )
    print(f"{request.contract_name} proxy deployed at {proxy.address}")
    return proxy


def upgrade(
    toolkit: ProxyToolkit, request: UpgradeRequest, interactive: bool = False
) -> ProxyHandle:
    """Upgrades an existing proxy to a new version of its contract."""
    signer = toolkit.get_signer()
    print(f"Upgrading contracts with the account: {signer.address}")

    factory = toolkit.get_contract_factory(request.new_contract_name)
    print(f"Upgrading proxy contract at address: {request.proxy_address}")
    if interactive:
        _confirm_upgrade(request.proxy_address, request.new_contract_name)

    upgraded = toolkit.upgrade_proxy(request.proxy_address, factory, request.call_data)
    print(
        f"{upgraded.contract_name} proxy at {upgraded.address} "
        f"upgraded to implementation {upgraded.implementation}"
    )
    return upgraded


def execute(procedure: typing.Callable, *args, **kwargs) -> int:
    """
    Runs a deployment procedure to completion and returns the process exit code:
    0 on success, 1 on any error. Errors are reported as-is; nothing is retried.
    """
    try:
        procedure(*args, **kwargs)
    except Exception as error:
        click.secho(f"{type(error).__name__}: {error}", fg="red", err=True)
        return 1
    return 0
