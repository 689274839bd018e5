import pytest
from eth_utils import to_checksum_address

from deployment.constants import (
    EIP1967_ADMIN_SLOT,
    EIP1967_IMPLEMENTATION_SLOT,
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
    PLACEHOLDER_PROXY_ADDRESS,
)
from deployment.proxy import ApeProxyToolkit
from tests.conftest import CENTRAL_AUTHORITY, SIBTEL, STABLECOIN


@pytest.fixture
def deployer(accounts):
    return accounts[0]


@pytest.fixture
def proxy_toolkit(deployer):
    return ApeProxyToolkit(account=deployer, autosign=True)


@pytest.fixture
def proxy(proxy_toolkit):
    factory = proxy_toolkit.get_contract_factory("SettlementMock")
    return proxy_toolkit.deploy_proxy(factory, [SIBTEL, STABLECOIN, CENTRAL_AUTHORITY])


def _slot_address(chain, address, slot):
    return to_checksum_address(chain.provider.get_storage(address=address, slot=slot)[-20:])


def test_deploy_proxy(project, chain, deployer, proxy):
    assert proxy.contract_name == "SettlementMock"
    assert proxy.deployer == deployer.address
    assert proxy.chain_id == chain.chain_id
    assert proxy.implementation != proxy.address
    assert proxy.implementation == _slot_address(
        chain, proxy.address, EIP1967_IMPLEMENTATION_SLOT
    )
    assert proxy.admin == _slot_address(chain, proxy.address, EIP1967_ADMIN_SLOT)
    assert any(entry["name"] == "initialize" for entry in proxy.abi if "name" in entry)

    # initializer ran through the proxy, not on the implementation
    settlement = project.SettlementMock.at(proxy.address)
    assert settlement.sibTel() == SIBTEL
    assert settlement.stablecoin() == STABLECOIN
    assert settlement.centralAuthority() == CENTRAL_AUTHORITY
    assert settlement.version() == 1
    assert project.SettlementMock.at(proxy.implementation).sibTel() != SIBTEL

    oz = project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]
    assert oz.ProxyAdmin.at(proxy.admin).owner() == deployer.address


def test_upgrade_proxy(project, chain, proxy_toolkit, proxy):
    factory = proxy_toolkit.get_contract_factory("SettlementMockV2")

    upgraded = proxy_toolkit.upgrade_proxy(proxy.address, factory)

    assert upgraded.contract_name == "SettlementMockV2"
    assert upgraded.address == proxy.address
    assert upgraded.admin == proxy.admin
    assert upgraded.implementation != proxy.implementation
    assert upgraded.implementation == _slot_address(
        chain, proxy.address, EIP1967_IMPLEMENTATION_SLOT
    )

    settlement = project.SettlementMockV2.at(proxy.address)
    assert settlement.version() == 2
    assert settlement.sibTel() == SIBTEL


def test_upgrade_accepts_lowercase_address(proxy_toolkit, proxy):
    factory = proxy_toolkit.get_contract_factory("SettlementMockV2")

    upgraded = proxy_toolkit.upgrade_proxy(proxy.address.lower(), factory)

    assert upgraded.address == proxy.address


def test_upgrade_placeholder_address(proxy_toolkit):
    factory = proxy_toolkit.get_contract_factory("SettlementMockV2")

    with pytest.raises(ValueError):
        proxy_toolkit.upgrade_proxy(PLACEHOLDER_PROXY_ADDRESS, factory)


def test_upgrade_non_proxy_contract(project, deployer, proxy_toolkit):
    plain_contract = deployer.deploy(project.SettlementMock)
    factory = proxy_toolkit.get_contract_factory("SettlementMockV2")

    with pytest.raises(ValueError, match="EIP1967-compatible proxy"):
        proxy_toolkit.upgrade_proxy(plain_contract.address, factory)


def test_unknown_contract_factory(proxy_toolkit):
    with pytest.raises(ValueError, match="No contract found with name 'PaymentSettlement'"):
        proxy_toolkit.get_contract_factory("PaymentSettlement")
