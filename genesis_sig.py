import hashlib
import json
from typing import Any, Dict

from genesis_builder import GenesisRecord
from seed_keys import DEFAULT_SS58_FORMAT


def canonical_json(genesis: GenesisRecord, ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
    return json.dumps(genesis.to_json(ss58_format), sort_keys=True, separators=(",", ":"))


def compute_genesis_hash(genesis: GenesisRecord) -> str:
    """Same inputs, same digest"""
    return hashlib.sha256(canonical_json(genesis).encode("utf-8")).hexdigest()


def _runtime_digest(spec: Dict[str, Any]) -> str:
    payload = json.dumps(spec["genesis"]["runtime"], sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def seal_genesis(spec: Dict[str, Any]) -> None:
    """
    Attach the digest of an exported chain spec's genesis.
    Call ONLY on freshly exported specs.
    """
    spec["genesisHash"] = _runtime_digest(spec)


def verify_genesis(spec: Dict[str, Any]) -> None:
    """
    Call on every load of an exported spec.
    """
    if "genesisHash" not in spec:
        raise ValueError("Missing genesis hash")

    expected = _runtime_digest(spec)
    if expected != spec["genesisHash"]:
        raise ValueError("Genesis does not match its hash")
