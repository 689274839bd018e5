#!/usr/bin/python3
# Usage:
#  > ape run upgrade --network ethereum:sepolia:infura \
#        --params-filepath deployment/constructor_params/sepolia/upgrade-payment-settlement.yml

import sys

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.networks import is_local_network
from deployment.options import autosign_option, params_option, proxy_address_option, verify_option
from deployment.params import UpgradeRequest, VariableContext
from deployment.procedures import execute, upgrade
from deployment.proxy import ApeProxyToolkit
from deployment.registry import record_deployment
from deployment.utils import _load_yaml, check_plugins, validate_config


def upgrade_from_params(account, params_filepath, proxy_address, autosign, verify) -> None:
    check_plugins(verify=verify)
    toolkit = ApeProxyToolkit(account=account, autosign=autosign)
    config = _load_yaml(params_filepath)
    registry_filepath = validate_config(
        config=config, chain_id=toolkit.chain_id, live=not is_local_network()
    )
    context = VariableContext(
        constants=config.get("constants"),
        deployer_address=toolkit.get_signer().address,
        registry_filepath=registry_filepath,
        chain_id=toolkit.chain_id,
    )
    request = UpgradeRequest.from_config(config, context)
    if proxy_address:
        request = request._replace(proxy_address=proxy_address)
    upgraded = upgrade(toolkit, request, interactive=not autosign)
    record_deployment(upgraded, registry_filepath)
    if verify:
        toolkit.publish(upgraded)


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_option
@proxy_address_option
@autosign_option
@verify_option
def cli(network, account, params_filepath, proxy_address, autosign, verify):
    """Upgrade an existing proxy to a new contract version."""
    sys.exit(
        execute(upgrade_from_params, account, params_filepath, proxy_address, autosign, verify)
    )


if __name__ == "__main__":
    cli()
