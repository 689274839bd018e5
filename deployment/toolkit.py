import typing
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from eth_typing import ChecksumAddress

from deployment.constants import DEFAULT_INITIALIZER


class ProxyHandle(typing.NamedTuple):
    """A deployed (or freshly upgraded) upgradeable proxy."""

    contract_name: str
    address: ChecksumAddress
    implementation: ChecksumAddress
    admin: ChecksumAddress
    chain_id: int
    tx_hash: str
    block_number: int
    deployer: ChecksumAddress
    abi: typing.Tuple[dict, ...] = ()


class ProxyToolkit(ABC):
    """
    The capabilities needed to publish and upgrade a proxied contract:
    a signing account, compiled contract factories and the proxy deploy/upgrade operations.
    """

    @property
    @abstractmethod
    def chain_id(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_signer(self) -> Any:
        """Returns the account used to send transactions."""
        raise NotImplementedError

    @abstractmethod
    def get_contract_factory(self, name: str) -> Any:
        """Returns the compiled contract factory for the given contract name."""
        raise NotImplementedError

    @abstractmethod
    def deploy_proxy(
        self,
        factory: Any,
        constructor_args: Sequence[Any],
        initializer: Optional[str] = DEFAULT_INITIALIZER,
    ) -> ProxyHandle:
        """
        Deploys the implementation behind a new proxy and calls the initializer
        through the proxy. Returns once the deployment is confirmed.
        """
        raise NotImplementedError

    @abstractmethod
    def upgrade_proxy(
        self, proxy_address: str, factory: Any, call_data: bytes = b""
    ) -> ProxyHandle:
        """Points the proxy at a freshly deployed implementation of the given factory."""
        raise NotImplementedError

    def publish(self, handle: ProxyHandle) -> None:
        """Publishes the proxy implementation source to a block explorer."""
        return None
