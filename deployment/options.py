from pathlib import Path

import click

from deployment.types import ChecksumAddress

params_option = click.option(
    "--params-filepath",
    "-p",
    help="Filepath of the params YAML file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

contract_name_option = click.option(
    "--contract-name",
    "-c",
    help="Name of the contract to deploy; required if the params file lists several",
    type=click.STRING,
    required=False,
)

proxy_address_option = click.option(
    "--proxy-address",
    help="Address of the proxy to upgrade; overrides the params file",
    type=ChecksumAddress(),
    required=False,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-f",
    help="Filepath of the deployment registry",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions automatically and skip confirmation prompts",
    is_flag=True,
    default=False,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Publish the implementation source to the network's block explorer",
    default=False,
)
