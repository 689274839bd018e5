#!/usr/bin/python3
# Usage:
#  > ape run deploy_payment_settlement --network ethereum:sepolia:infura

import sys
from typing import Optional

from deployment.constants import ARTIFACTS_DIR, DEFAULT_INITIALIZER, PAYMENT_SETTLEMENT
from deployment.params import DeploymentRequest
from deployment.procedures import deploy, execute
from deployment.proxy import ApeProxyToolkit
from deployment.registry import record_deployment
from deployment.toolkit import ProxyToolkit
from deployment.utils import check_plugins

VERIFY = False
AUTOSIGN = False
REGISTRY_FILEPATH = ARTIFACTS_DIR / "payment-settlement.json"  # None skips recording

CONTRACT_NAME = PAYMENT_SETTLEMENT
INITIALIZER = DEFAULT_INITIALIZER

# Replace with the actual SIBTEL, stablecoin and central authority addresses
SIBTEL_ADDRESS = "0xeBD4A6BC935E1FBB338efc2b82c4333Cd529e6b2"
STABLECOIN_ADDRESS = "0xb9915C43421eE77bEe6c12EE49a5C94fee754Ae6"
CENTRAL_AUTHORITY_ADDRESS = "0x8Be6Aa4A54b79075D486B154046c6c324A85B93E"


def deploy_payment_settlement(toolkit: Optional[ProxyToolkit] = None) -> None:
    check_plugins(verify=VERIFY)
    toolkit = toolkit or ApeProxyToolkit(autosign=AUTOSIGN)
    request = DeploymentRequest(
        contract_name=CONTRACT_NAME,
        constructor_args=(SIBTEL_ADDRESS, STABLECOIN_ADDRESS, CENTRAL_AUTHORITY_ADDRESS),
        initializer=INITIALIZER,
        argument_names=("sibTel", "stablecoin", "centralAuthority"),
    )
    proxy = deploy(toolkit, request, interactive=not AUTOSIGN)
    if REGISTRY_FILEPATH is not None:
        record_deployment(proxy, REGISTRY_FILEPATH)
    if VERIFY:
        toolkit.publish(proxy)


def main(toolkit: Optional[ProxyToolkit] = None):
    """
    This script deploys PaymentSettlement behind a transparent upgradeable proxy.
    """
    sys.exit(execute(deploy_payment_settlement, toolkit))
