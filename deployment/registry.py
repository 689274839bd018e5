import json
from collections import defaultdict
from pathlib import Path
from typing import List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.toolkit import ProxyHandle

ChainId = int
ContractName = str


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Represents a single proxied contract in a deployment registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    implementation: ChecksumAddress
    abi: list
    tx_hash: str
    block_number: int
    deployer: str


def entry_from_handle(handle: ProxyHandle) -> RegistryEntry:
    return RegistryEntry(
        chain_id=handle.chain_id,
        name=handle.contract_name,
        address=to_checksum_address(handle.address),
        implementation=to_checksum_address(handle.implementation),
        abi=list(handle.abi),
        tx_hash=handle.tx_hash,
        block_number=handle.block_number,
        deployer=handle.deployer,
    )


def read_registry(filepath: Path) -> List[RegistryEntry]:
    with open(filepath, "r") as file:
        data = json.load(file)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                implementation=artifacts["implementation"],
                abi=artifacts["abi"],
                tx_hash=artifacts["tx_hash"],
                block_number=artifacts["block_number"],
                deployer=artifacts["deployer"],
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path) -> Path:
    """Writes a deployment registry to a file, replacing any previous content."""
    # common order keeps registry diffs readable
    entries = sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name))

    data = defaultdict(dict)
    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "implementation": entry.implementation,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
        }

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def record_deployment(handle: ProxyHandle, filepath: Path) -> Path:
    """
    Records a proxy deployment or upgrade in the registry.

    Entries on the same chain with the same name or the same proxy address are
    replaced, so an upgrade supersedes the entry of the version it replaced.
    """
    new_entry = entry_from_handle(handle)
    entries = list()
    if filepath.exists():
        print(f"Updating existing registry at {filepath}.")
        for entry in read_registry(filepath):
            same_chain = entry.chain_id == new_entry.chain_id
            same_contract = entry.name == new_entry.name or entry.address == new_entry.address
            if same_chain and same_contract:
                continue
            entries.append(entry)
    else:
        print(f"Creating new registry at {filepath}.")

    entries.append(new_entry)
    write_registry(entries=entries, filepath=filepath)
    print(f"(i) Registry written to {filepath}!")
    return filepath


def find_entry(
    filepath: Path, chain_id: ChainId, contract_name: ContractName
) -> Optional[RegistryEntry]:
    if not filepath.exists():
        return None
    for entry in read_registry(filepath):
        if entry.chain_id == chain_id and entry.name == contract_name:
            return entry
    return None


def proxy_address_from_registry(
    filepath: Path, chain_id: ChainId, contract_name: ContractName
) -> ChecksumAddress:
    """Returns the proxy address recorded for a contract on the given chain."""
    entry = find_entry(filepath=filepath, chain_id=chain_id, contract_name=contract_name)
    if entry is None:
        raise ValueError(
            f"Contract '{contract_name}' not found in registry, '{filepath}', for chain {chain_id}"
        )
    return entry.address
