import os
from typing import Any, NamedTuple, Optional, Sequence

import pytest
from eth_utils import to_checksum_address

from deployment.constants import DEFAULT_INITIALIZER, PAYMENT_SETTLEMENT, PAYMENT_SETTLEMENT_V2
from deployment.toolkit import ProxyHandle, ProxyToolkit

CHAIN_ID = 11155111

SIBTEL = "0xeBD4A6BC935E1FBB338efc2b82c4333Cd529e6b2"
STABLECOIN = "0xb9915C43421eE77bEe6c12EE49a5C94fee754Ae6"
CENTRAL_AUTHORITY = "0x8Be6Aa4A54b79075D486B154046c6c324A85B93E"


def random_address() -> str:
    return to_checksum_address("0x" + os.urandom(20).hex())


class FakeSigner(NamedTuple):
    address: str


class FakeFactory(NamedTuple):
    name: str


class FakeToolkit(ProxyToolkit):
    """In-memory stand-in for a connected toolkit; every proxy gets a fresh random address."""

    ABI = ({"type": "function", "name": "initialize", "inputs": [], "outputs": []},)

    def __init__(self, contracts=(PAYMENT_SETTLEMENT, PAYMENT_SETTLEMENT_V2), error=None):
        self.contracts = set(contracts)
        self.error = error
        self.signer = FakeSigner(address=random_address())
        self.deploy_calls = list()
        self.upgrade_calls = list()
        self.published = list()
        self.proxies = dict()

    @property
    def chain_id(self) -> int:
        return CHAIN_ID

    def get_signer(self) -> FakeSigner:
        return self.signer

    def get_contract_factory(self, name: str) -> FakeFactory:
        if name not in self.contracts:
            raise ValueError(f"No contract found with name '{name}'.")
        return FakeFactory(name=name)

    def _handle(self, name: str, address: str) -> ProxyHandle:
        return ProxyHandle(
            contract_name=name,
            address=address,
            implementation=random_address(),
            admin=self.proxies.get(address) or random_address(),
            chain_id=CHAIN_ID,
            tx_hash="0x" + os.urandom(32).hex(),
            block_number=len(self.deploy_calls) + len(self.upgrade_calls),
            deployer=self.signer.address,
            abi=self.ABI,
        )

    def deploy_proxy(
        self,
        factory: FakeFactory,
        constructor_args: Sequence[Any],
        initializer: Optional[str] = DEFAULT_INITIALIZER,
    ) -> ProxyHandle:
        self.deploy_calls.append((factory, list(constructor_args), initializer))
        if self.error:
            raise self.error
        handle = self._handle(factory.name, random_address())
        self.proxies[handle.address] = handle.admin
        return handle

    def upgrade_proxy(self, proxy_address: str, factory: FakeFactory, call_data: bytes = b""):
        self.upgrade_calls.append((proxy_address, factory, call_data))
        if self.error:
            raise self.error
        proxy_address = to_checksum_address(proxy_address)
        return self._handle(factory.name, proxy_address)

    def publish(self, handle: ProxyHandle) -> None:
        self.published.append(handle)


@pytest.fixture
def toolkit():
    return FakeToolkit()


@pytest.fixture
def reverting_toolkit():
    return FakeToolkit(error=RuntimeError("execution reverted: Initializable: already initialized"))


@pytest.fixture
def registry_filepath(tmp_path):
    return tmp_path / "artifacts" / "payment-settlement.json"


@pytest.fixture
def handle(toolkit):
    return toolkit.deploy_proxy(
        toolkit.get_contract_factory(PAYMENT_SETTLEMENT), [SIBTEL, STABLECOIN, CENTRAL_AUTHORITY]
    )
