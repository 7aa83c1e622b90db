import hashlib
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Type, TypeVar

from bip39 import bip39_to_mini_secret
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from substrateinterface import Keypair, KeypairType
from substrateinterface.utils.ss58 import ss58_encode

# =========================
# CONSTANTS
# =========================

KEY_LENGTH = 32
DEFAULT_SS58_FORMAT = 42

# Phrase behind every //<seed> development key
DEV_PHRASE = "bottom drive obey lake curtain smoke basket hold race lonely fit walk"

_PATH_RE = re.compile(r"^(//?[^/]+)+$")
_JUNCTION_RE = re.compile(r"(//?)([^/]+)")


class InvalidSeed(ValueError):
    """Derivation path that cannot be turned into a key pair"""


class InvalidKeyMaterial(ValueError):
    """Literal key bytes of the wrong shape"""


class KeyType(Enum):
    """Key type ids. Grandpa keys are ed25519, the rest sr25519."""
    ACCOUNT = b"acco"
    GRANDPA = b"gran"               # Finality voting
    BABE = b"babe"                  # Block production eligibility
    IM_ONLINE = b"imon"             # Liveness heartbeat
    AUTHORITY_DISCOVERY = b"audi"   # Authority discovery routing


ED25519_KEY_TYPES = {KeyType.GRANDPA}

# =========================
# KEY TYPES (IMMUTABLE)
# =========================

@dataclass(frozen=True, order=True)
class AccountId:
    """32-byte account identifier. Ordered by raw bytes."""
    raw: bytes

    def __post_init__(self):
        _check_length(self.raw, "AccountId")

    def to_ss58(self, ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
        return ss58_encode(self.raw.hex(), ss58_format=ss58_format)

    def __str__(self):
        return "0x" + self.raw.hex()


@dataclass(frozen=True)
class PublicKey:
    """
    Raw public key of one key type. Keys of different types never
    compare equal, even over the same bytes.
    """
    raw: bytes

    KEY_TYPE = KeyType.ACCOUNT

    def __post_init__(self):
        _check_length(self.raw, type(self).__name__)

    def to_ss58(self, ss58_format: int = DEFAULT_SS58_FORMAT) -> str:
        return ss58_encode(self.raw.hex(), ss58_format=ss58_format)

    def __str__(self):
        return "0x" + self.raw.hex()


class GrandpaId(PublicKey):
    KEY_TYPE = KeyType.GRANDPA


class BabeId(PublicKey):
    KEY_TYPE = KeyType.BABE


class ImOnlineId(PublicKey):
    KEY_TYPE = KeyType.IM_ONLINE


class AuthorityDiscoveryId(PublicKey):
    KEY_TYPE = KeyType.AUTHORITY_DISCOVERY


TPublic = TypeVar("TPublic", bound=PublicKey)


def _check_length(raw: bytes, what: str) -> None:
    if not isinstance(raw, bytes):
        raise TypeError(f"{what} expects bytes, got {type(raw).__name__}")
    if len(raw) != KEY_LENGTH:
        raise InvalidKeyMaterial(f"{what} must be {KEY_LENGTH} bytes, got {len(raw)}")


# =========================
# DERIVATION
# =========================

def parse_path(path: str) -> List[Tuple[bool, str]]:
    """
    Split a derivation path into (hard, name) junctions.
    "//Alice//stash" -> [(True, "Alice"), (True, "stash")]
    """
    if not path.startswith("//") or not _PATH_RE.match(path):
        raise InvalidSeed(f"Malformed derivation path: {path!r}")
    return [(sep == "//", name) for sep, name in _JUNCTION_RE.findall(path)]


def _scale_bytes(data: bytes) -> bytes:
    """SCALE compact length prefix, then the bytes"""
    n = len(data)
    if n < 1 << 6:
        prefix = bytes([n << 2])
    elif n < 1 << 14:
        prefix = ((n << 2) | 0b01).to_bytes(2, "little")
    else:
        prefix = ((n << 2) | 0b10).to_bytes(4, "little")
    return prefix + data


def chain_code(junction: str) -> bytes:
    """Numeric junctions encode as u64, the rest as SCALE strings; 32 bytes either way"""
    if junction.isdigit() and int(junction) < 1 << 64:
        encoded = int(junction).to_bytes(8, "little")
    else:
        encoded = _scale_bytes(junction.encode("utf-8"))
    if len(encoded) > KEY_LENGTH:
        return hashlib.blake2b(encoded, digest_size=KEY_LENGTH).digest()
    return encoded.ljust(KEY_LENGTH, b"\0")


def ed25519_secret(path: str) -> bytes:
    """
    Hard-derive an ed25519 seed from the development phrase.
    ed25519 has no soft derivation.
    """
    secret = bytes(bytearray(bip39_to_mini_secret(DEV_PHRASE, "")))
    for hard, junction in parse_path(path):
        if not hard:
            raise InvalidSeed(f"Soft junction {junction!r} in ed25519 path {path!r}")
        secret = hashlib.blake2b(
            _scale_bytes(b"Ed25519HDKD") + secret + chain_code(junction),
            digest_size=KEY_LENGTH
        ).digest()
    return secret


def ed25519_public(path: str) -> bytes:
    private_key = ed25519.Ed25519PrivateKey.from_private_bytes(ed25519_secret(path))
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )


def sr25519_public(path: str) -> bytes:
    parse_path(path)
    keypair = Keypair.create_from_uri(path, crypto_type=KeypairType.SR25519)
    return bytes(keypair.public_key)


def get_from_seed(seed: str, key_cls: Type[TPublic]) -> TPublic:
    """Generate the public key of `key_cls` from a seed, via path //<seed>"""
    path = f"//{seed}"
    if key_cls.KEY_TYPE in ED25519_KEY_TYPES:
        return key_cls(ed25519_public(path))
    return key_cls(sr25519_public(path))


def account_id_from_public(public: PublicKey) -> AccountId:
    """Only account keys may sign for an account"""
    if public.KEY_TYPE is not KeyType.ACCOUNT:
        raise TypeError(f"{type(public).__name__} cannot be used as an account signer")
    return AccountId(public.raw)


def get_account_id_from_seed(seed: str) -> AccountId:
    """Generate an account ID from seed"""
    return account_id_from_public(get_from_seed(seed, PublicKey))


# =========================
# LITERAL KEY MATERIAL
# =========================

def _bytes_from_hex(value: str) -> bytes:
    text = value[2:] if value.startswith("0x") else value
    try:
        raw = bytes.fromhex(text)
    except ValueError as e:
        raise InvalidKeyMaterial(f"Not hex: {value!r}") from e
    if len(raw) != KEY_LENGTH:
        raise InvalidKeyMaterial(f"Expected {KEY_LENGTH} bytes, got {len(raw)}: {value!r}")
    return raw


def public_from_hex(value: str, key_cls: Type[TPublic]) -> TPublic:
    return key_cls(_bytes_from_hex(value))


def account_id_from_hex(value: str) -> AccountId:
    return AccountId(_bytes_from_hex(value))


# =========================
# DERIVER CAPABILITY
# =========================

class KeyDeriver:
    """
    One method per key type. The assembler and authority builder only
    ever talk to this, so tests can swap in deterministic fake keys.
    """

    def account_id(self, seed: str) -> AccountId:
        raise NotImplementedError

    def grandpa(self, seed: str) -> GrandpaId:
        raise NotImplementedError

    def babe(self, seed: str) -> BabeId:
        raise NotImplementedError

    def im_online(self, seed: str) -> ImOnlineId:
        raise NotImplementedError

    def authority_discovery(self, seed: str) -> AuthorityDiscoveryId:
        raise NotImplementedError


class DevKeyring(KeyDeriver):
    """Development keys as any Substrate keyring derives them from //<seed>"""

    def account_id(self, seed: str) -> AccountId:
        return get_account_id_from_seed(seed)

    def grandpa(self, seed: str) -> GrandpaId:
        return get_from_seed(seed, GrandpaId)

    def babe(self, seed: str) -> BabeId:
        return get_from_seed(seed, BabeId)

    def im_online(self, seed: str) -> ImOnlineId:
        return get_from_seed(seed, ImOnlineId)

    def authority_discovery(self, seed: str) -> AuthorityDiscoveryId:
        return get_from_seed(seed, AuthorityDiscoveryId)


DEV_KEYRING = DevKeyring()
