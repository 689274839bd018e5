#!/usr/bin/python3
# Usage:
#  > ape run upgrade_payment_settlement --network ethereum:sepolia:infura

import sys
from typing import Optional

from deployment.constants import ARTIFACTS_DIR, PAYMENT_SETTLEMENT_V2, PLACEHOLDER_PROXY_ADDRESS
from deployment.params import UpgradeRequest
from deployment.procedures import execute, upgrade
from deployment.proxy import ApeProxyToolkit
from deployment.registry import record_deployment
from deployment.toolkit import ProxyToolkit
from deployment.utils import check_plugins

VERIFY = False
AUTOSIGN = False
REGISTRY_FILEPATH = ARTIFACTS_DIR / "payment-settlement.json"  # None skips recording

# Replace with the proxy address printed by deploy_payment_settlement
PROXY_ADDRESS = PLACEHOLDER_PROXY_ADDRESS
NEW_CONTRACT_NAME = PAYMENT_SETTLEMENT_V2


def upgrade_payment_settlement(toolkit: Optional[ProxyToolkit] = None) -> None:
    check_plugins(verify=VERIFY)
    toolkit = toolkit or ApeProxyToolkit(autosign=AUTOSIGN)
    request = UpgradeRequest(proxy_address=PROXY_ADDRESS, new_contract_name=NEW_CONTRACT_NAME)
    upgraded = upgrade(toolkit, request, interactive=not AUTOSIGN)
    if REGISTRY_FILEPATH is not None:
        record_deployment(upgraded, REGISTRY_FILEPATH)
    if VERIFY:
        toolkit.publish(upgraded)


def main(toolkit: Optional[ProxyToolkit] = None):
    """
    This script upgrades the PaymentSettlement proxy to PaymentSettlementV2.
    """
    sys.exit(execute(upgrade_payment_settlement, toolkit))
