import typing
from typing import Any, Optional, Sequence

from ape import chain, networks, project
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from ape.utils import EMPTY_BYTES32
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.constants import (
    DEFAULT_INITIALIZER,
    EIP1967_ADMIN_SLOT,
    EIP1967_IMPLEMENTATION_SLOT,
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
    PROXY_ADMIN_CONTRACT_NAME,
    PROXY_CONTRACT_NAME,
)
from deployment.toolkit import ProxyHandle, ProxyToolkit
from deployment.utils import get_contract_container


def _oz_dependency():
    return project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]


def _get_abi(container: ContractContainer) -> typing.Tuple[dict, ...]:
    return tuple(entry.model_dump(mode="json") for entry in container.contract_type.abi)


def _read_address_slot(address: ChecksumAddress, slot: int) -> ChecksumAddress:
    value = chain.provider.get_storage(address=address, slot=slot)
    if value == EMPTY_BYTES32:
        raise ValueError(
            f"EIP1967 slot {hex(slot)} for contract at {address} is empty. "
            "Are you sure this is an EIP1967-compatible proxy?"
        )
    return to_checksum_address(value[-20:])


class ApeProxyToolkit(ProxyToolkit):
    """
    Deploys and upgrades OpenZeppelin transparent proxies with an ape account.
    """

    def __init__(
        self,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._account.set_autosign(autosign)

    @property
    def chain_id(self) -> int:
        return networks.provider.network.chain_id

    def get_signer(self) -> AccountAPI:
        return self._account

    def get_contract_factory(self, name: str) -> ContractContainer:
        return get_contract_container(name)

    def _deploy(self, container: ContractContainer, *args) -> ContractInstance:
        print(f"\nDeploying {container.contract_type.name}...")
        return self._account.deploy(container, *args)

    def _transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        print(
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method}"
        )
        return method(*args, sender=self._account)

    def _handle(
        self,
        container: ContractContainer,
        proxy_address: ChecksumAddress,
        receipt: ReceiptAPI,
    ) -> ProxyHandle:
        return ProxyHandle(
            contract_name=container.contract_type.name,
            address=proxy_address,
            implementation=_read_address_slot(proxy_address, EIP1967_IMPLEMENTATION_SLOT),
            admin=_read_address_slot(proxy_address, EIP1967_ADMIN_SLOT),
            chain_id=self.chain_id,
            tx_hash=receipt.txn_hash,
            block_number=receipt.block_number,
            deployer=self._account.address,
            abi=_get_abi(container),
        )

    def deploy_proxy(
        self,
        factory: ContractContainer,
        constructor_args: Sequence[Any],
        initializer: Optional[str] = DEFAULT_INITIALIZER,
    ) -> ProxyHandle:
        implementation = self._deploy(factory)
        if initializer:
            method_handler = getattr(implementation, initializer)
            data = method_handler.encode_input(*constructor_args)
        else:
            data = b""

        proxy_container = getattr(_oz_dependency(), PROXY_CONTRACT_NAME)
        print(
            f"\nDeploying {proxy_container.contract_type.name} "
            f"contract to proxy {factory.contract_type.name}."
        )
        proxy_contract = self._deploy(
            proxy_container,
            implementation.address,
            self._account.address,  # initialOwner of the proxy admin
            data,
        )
        return self._handle(factory, proxy_contract.address, proxy_contract.receipt)

    def upgrade_proxy(
        self, proxy_address: str, factory: ContractContainer, call_data: bytes = b""
    ) -> ProxyHandle:
        proxy_address = to_checksum_address(proxy_address)
        admin_address = _read_address_slot(proxy_address, EIP1967_ADMIN_SLOT)
        proxy_admin = getattr(_oz_dependency(), PROXY_ADMIN_CONTRACT_NAME).at(admin_address)

        implementation = self._deploy(factory)
        receipt = self._transact(
            proxy_admin.upgradeAndCall, proxy_address, implementation.address, call_data
        )
        return self._handle(factory, proxy_address, receipt)

    def publish(self, handle: ProxyHandle) -> None:
        print(f"(i) Verifying {handle.contract_name} implementation at {handle.implementation}...")
        networks.provider.network.explorer.publish_contract(handle.implementation)
