import typing
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ape.utils import ZERO_ADDRESS
from eth_utils import to_bytes

from deployment.constants import DEFAULT_INITIALIZER
from deployment.registry import proxy_address_from_registry

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"
CONTRACT_INITIALIZER_KEY = "initializer"
UPGRADE_KEY = "upgrade"


class ConfigError(ValueError):
    """Raised when a params file is missing required fields or is malformed."""


class VariableContext:
    def __init__(
        self,
        constants: Optional[Dict[str, Any]] = None,
        deployer_address: Optional[str] = None,
        registry_filepath: Optional[Path] = None,
        chain_id: Optional[int] = None,
    ):
        self.constants = constants or dict()
        self.deployer_address = deployer_address
        self.registry_filepath = registry_filepath
        self.chain_id = chain_id


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        return isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    def __init__(self, context: VariableContext):
        self.deployer_address = context.deployer_address

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self) -> Any:
        if self.deployer_address is None:
            return ZERO_ADDRESS
        return self.deployer_address


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise ValueError(f"Constant '{constant_name}' not found in deployment file.")

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self) -> Any:
        return self.constant_value


class ContractName(Variable):
    """A previously deployed proxy, looked up by contract name in the registry."""

    def __init__(self, contract_name: str, context: VariableContext):
        if context.registry_filepath is None or context.chain_id is None:
            raise ValueError(
                f"Contract variable '{contract_name}' requires a registry and a chain id"
            )
        self.contract_name = contract_name
        self.registry_filepath = context.registry_filepath
        self.chain_id = context.chain_id

    def resolve(self) -> Any:
        return proxy_address_from_registry(
            filepath=self.registry_filepath,
            chain_id=self.chain_id,
            contract_name=self.contract_name,
        )


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount(context)
    elif Constant.is_constant(variable):
        return Constant(variable, context)
    else:
        return ContractName(variable, context)


def _resolve_value(value: Any, context: VariableContext) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_value(v, context) for v in value]

    if Variable.is_variable(value):
        return _variable_from_value(value, context).resolve()

    return value  # literally a value


def _get_contract_data(config: Dict, contract_name: Optional[str]) -> Tuple[str, Dict]:
    """Picks a single contract entry from the params file 'contracts' list."""
    contracts = config.get("contracts")
    if not contracts:
        raise ConfigError("Params file missing 'contracts' field.")

    found = list()
    for contract_info in contracts:
        if isinstance(contract_info, str):
            found.append((contract_info, dict()))
        elif isinstance(contract_info, dict) and len(contract_info) == 1:
            name = list(contract_info.keys())[0]  # only one entry
            found.append((name, contract_info[name] or dict()))
        else:
            raise ConfigError("Malformed contracts YAML.")

    if contract_name is None:
        if len(found) != 1:
            raise ConfigError(
                f"Params file lists {len(found)} contracts; specify which one to deploy."
            )
        return found[0]

    for name, data in found:
        if name == contract_name:
            return name, data
    raise ConfigError(f"Contract '{contract_name}' not found in params file.")


class DeploymentRequest(typing.NamedTuple):
    """A single proxy deployment: what to deploy and how to initialize it."""

    contract_name: str
    constructor_args: Tuple[Any, ...]
    initializer: str = DEFAULT_INITIALIZER
    argument_names: Tuple[str, ...] = ()

    @classmethod
    def from_config(
        cls,
        config: Dict,
        context: VariableContext,
        contract_name: Optional[str] = None,
    ) -> "DeploymentRequest":
        """Loads a deployment request from a parsed params file."""
        print("Processing initializer parameters...")
        name, data = _get_contract_data(config, contract_name)

        parameters = data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict()
        if not isinstance(parameters, dict):
            raise ConfigError(f"Malformed initializer parameter config for {name}.")

        initializer = data.get(CONTRACT_INITIALIZER_KEY) or DEFAULT_INITIALIZER
        resolved_args = [_resolve_value(value, context) for value in parameters.values()]
        return cls(
            contract_name=name,
            constructor_args=tuple(resolved_args),
            initializer=initializer,
            argument_names=tuple(parameters.keys()),
        )

    def named_args(self) -> List[Tuple[str, Any]]:
        names = self.argument_names or [f"arg{i}" for i in range(len(self.constructor_args))]
        return list(zip(names, self.constructor_args))


class UpgradeRequest(typing.NamedTuple):
    """Upgrade of an existing proxy to a new contract version."""

    proxy_address: str
    new_contract_name: str
    call_data: bytes = b""

    @classmethod
    def from_config(cls, config: Dict, context: VariableContext) -> "UpgradeRequest":
        """Loads an upgrade request from a parsed params file."""
        print("Processing upgrade parameters...")
        upgrade_data = config.get(UPGRADE_KEY)
        if not isinstance(upgrade_data, dict):
            raise ConfigError(f"Params file missing '{UPGRADE_KEY}' field.")

        try:
            proxy = upgrade_data["proxy"]
            contract = upgrade_data["contract"]
        except KeyError as e:
            raise ConfigError(f"Upgrade config is missing {e}.")

        call_data = upgrade_data.get("call_data") or b""
        if isinstance(call_data, str):
            call_data = to_bytes(hexstr=call_data)

        return cls(
            proxy_address=_resolve_value(proxy, context),
            new_contract_name=contract,
            call_data=call_data,
        )
