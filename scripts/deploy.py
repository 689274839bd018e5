#!/usr/bin/python3
# Usage:
#  > ape run deploy --network ethereum:sepolia:infura \
#        --params-filepath deployment/constructor_params/sepolia/payment-settlement.yml

import sys

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.networks import is_local_network
from deployment.options import autosign_option, contract_name_option, params_option, verify_option
from deployment.params import DeploymentRequest, VariableContext
from deployment.procedures import deploy, execute
from deployment.proxy import ApeProxyToolkit
from deployment.registry import record_deployment
from deployment.utils import _load_yaml, check_plugins, validate_config


def deploy_from_params(account, params_filepath, contract_name, autosign, verify) -> None:
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
    request = DeploymentRequest.from_config(config, context, contract_name=contract_name)
    proxy = deploy(toolkit, request, interactive=not autosign)
    record_deployment(proxy, registry_filepath)
    if verify:
        toolkit.publish(proxy)


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_option
@contract_name_option
@autosign_option
@verify_option
def cli(network, account, params_filepath, contract_name, autosign, verify):
    """Deploy a contract behind an upgradeable proxy as described by a params file."""
    sys.exit(
        execute(deploy_from_params, account, params_filepath, contract_name, autosign, verify)
    )


if __name__ == "__main__":
    cli()
