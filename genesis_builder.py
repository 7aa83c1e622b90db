import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from authority import AuthorityKeySet, SessionKeys
from seed_keys import (
    DEFAULT_SS58_FORMAT,
    DEV_KEYRING,
    AccountId,
    AuthorityDiscoveryId,
    BabeId,
    GrandpaId,
    ImOnlineId,
    KeyDeriver,
    PublicKey,
)

logger = logging.getLogger(__name__)

Balance = int

# =========================
# CURRENCY
# =========================

MILLICENTS: Balance = 1_000_000_000
CENTS: Balance = 1_000 * MILLICENTS
DOLLARS: Balance = 100 * CENTS

ENDOWMENT: Balance = 10_000_000 * DOLLARS
STASH: Balance = ENDOWMENT // 1000

if ENDOWMENT % 1000:
    raise ValueError("ENDOWMENT must be divisible by 1000")

# Named development identities, endowed when no explicit list is given
DEV_SEEDS = ("Alice", "Bob", "Charlie", "Dave", "Eve", "Ferdie")

SOCIETY_MAX_MEMBERS = 999

# =========================
# ENUMS
# =========================

class StakerStatus(Enum):
    IDLE = "Idle"
    VALIDATOR = "Validator"
    NOMINATOR = "Nominator"


class ForceEra(Enum):
    NOT_FORCING = "NotForcing"
    FORCE_NEW = "ForceNew"
    FORCE_NONE = "ForceNone"
    FORCE_ALWAYS = "ForceAlways"


class AllowedSlots(Enum):
    PRIMARY_SLOTS = "PrimarySlots"
    PRIMARY_AND_SECONDARY_PLAIN_SLOTS = "PrimaryAndSecondaryPlainSlots"
    PRIMARY_AND_SECONDARY_VRF_SLOTS = "PrimaryAndSecondaryVRFSlots"


@dataclass(frozen=True)
class Perbill:
    """Fraction in parts per billion. Exact, no floats."""
    parts: int

    ACCURACY = 1_000_000_000

    def __post_init__(self):
        if not 0 <= self.parts <= self.ACCURACY:
            raise ValueError(f"Perbill out of range: {self.parts}")

    @classmethod
    def from_percent(cls, percent: int) -> "Perbill":
        return cls(percent * (cls.ACCURACY // 100))

# =========================
# SUBSYSTEM CONFIGS (IMMUTABLE)
# =========================

@dataclass(frozen=True)
class SystemConfig:
    code: bytes = b""
    changes_trie_config: Optional[dict] = None


@dataclass(frozen=True)
class BalancesConfig:
    balances: List[Tuple[AccountId, Balance]] = field(default_factory=list)


@dataclass(frozen=True)
class IndicesConfig:
    indices: List[Tuple[int, AccountId]] = field(default_factory=list)


@dataclass(frozen=True)
class SessionConfig:
    # (account, validator id, keys)
    keys: List[Tuple[AccountId, AccountId, SessionKeys]] = field(default_factory=list)


@dataclass(frozen=True)
class StakingConfig:
    validator_count: int = 0
    minimum_validator_count: int = 0
    # (stash, controller, bond, status)
    stakers: List[Tuple[AccountId, AccountId, Balance, StakerStatus]] = field(default_factory=list)
    invulnerables: List[AccountId] = field(default_factory=list)
    force_era: ForceEra = ForceEra.NOT_FORCING
    slash_reward_fraction: Perbill = Perbill(0)
    canceled_payout: Balance = 0


@dataclass(frozen=True)
class DemocracyConfig:
    pass


@dataclass(frozen=True)
class ElectionsConfig:
    members: List[Tuple[AccountId, Balance]] = field(default_factory=list)


@dataclass(frozen=True)
class CollectiveConfig:
    """Council and technical committee"""
    members: List[AccountId] = field(default_factory=list)


@dataclass(frozen=True)
class MembershipConfig:
    members: List[AccountId] = field(default_factory=list)


@dataclass(frozen=True)
class Schedule:
    """Contract execution schedule. Only the debug print switch is configurable here."""
    enable_println: bool = False


@dataclass(frozen=True)
class ContractsConfig:
    current_schedule: Schedule = Schedule()


@dataclass(frozen=True)
class SudoConfig:
    key: AccountId


@dataclass(frozen=True)
class BabeEpochConfiguration:
    c: Tuple[int, int] = (1, 4)
    allowed_slots: AllowedSlots = AllowedSlots.PRIMARY_AND_SECONDARY_PLAIN_SLOTS


BABE_GENESIS_EPOCH_CONFIG = BabeEpochConfiguration()


@dataclass(frozen=True)
class BabeConfig:
    authorities: List[Tuple[BabeId, int]] = field(default_factory=list)
    epoch_config: Optional[BabeEpochConfiguration] = None


@dataclass(frozen=True)
class GrandpaConfig:
    authorities: List[Tuple[GrandpaId, int]] = field(default_factory=list)


@dataclass(frozen=True)
class ImOnlineConfig:
    keys: List[ImOnlineId] = field(default_factory=list)


@dataclass(frozen=True)
class AuthorityDiscoveryConfig:
    keys: List[AuthorityDiscoveryId] = field(default_factory=list)


@dataclass(frozen=True)
class TreasuryConfig:
    pass


@dataclass(frozen=True)
class SocietyConfig:
    members: List[AccountId] = field(default_factory=list)
    pot: Balance = 0
    max_members: int = SOCIETY_MAX_MEMBERS


@dataclass(frozen=True)
class VestingConfig:
    # (account, begin, length, liquid)
    vesting: List[Tuple[AccountId, int, int, Balance]] = field(default_factory=list)


@dataclass(frozen=True)
class GiltConfig:
    pass

# =========================
# GENESIS RECORD
# =========================

SUBSYSTEMS = (
    "system",
    "balances",
    "indices",
    "session",
    "staking",
    "democracy",
    "elections",
    "council",
    "technical_committee",
    "contracts",
    "sudo",
    "babe",
    "im_online",
    "authority_discovery",
    "grandpa",
    "technical_membership",
    "treasury",
    "society",
    "vesting",
    "gilt",
)


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_json_value(value, ss58_format: int = DEFAULT_SS58_FORMAT):
    """Encode a config value for a chain spec. Keys render as SS58."""
    if isinstance(value, (AccountId, PublicKey)):
        return value.to_ss58(ss58_format)
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Perbill):
        return value.parts
    if is_dataclass(value):
        return {
            camel_case(f.name): to_json_value(getattr(value, f.name), ss58_format)
            for f in fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [to_json_value(v, ss58_format) for v in value]
    if isinstance(value, dict):
        return {k: to_json_value(v, ss58_format) for k, v in value.items()}
    return value


class GenesisRecord(Mapping):
    """
    Subsystem name -> initial configuration.
    Every recognized subsystem must be present, nothing else may be.
    """

    def __init__(self, configs: Dict[str, object]):
        missing = set(SUBSYSTEMS) - configs.keys()
        if missing:
            raise ValueError(f"Genesis missing subsystems: {sorted(missing)}")
        unknown = configs.keys() - set(SUBSYSTEMS)
        if unknown:
            raise ValueError(f"Unknown subsystems: {sorted(unknown)}")
        self._configs = {name: configs[name] for name in SUBSYSTEMS}

    def __getitem__(self, name: str):
        return self._configs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def __repr__(self):
        return f"GenesisRecord({', '.join(self._configs)})"

    def to_json(self, ss58_format: int = DEFAULT_SS58_FORMAT) -> dict:
        return {
            camel_case(name): to_json_value(config, ss58_format)
            for name, config in self._configs.items()
        }

# =========================
# ASSEMBLER
# =========================

def default_endowed_accounts(keyring: KeyDeriver = DEV_KEYRING) -> List[AccountId]:
    """The development identities, then their stash variants"""
    return (
        [keyring.account_id(seed) for seed in DEV_SEEDS]
        + [keyring.account_id(f"{seed}//stash") for seed in DEV_SEEDS]
    )


def cover_authority_stashes(
    endowed_accounts: Sequence[AccountId],
    initial_authorities: Sequence[AuthorityKeySet],
) -> List[AccountId]:
    """Append each authority stash that is not endowed yet, in authority order"""
    covered = list(endowed_accounts)
    for authority in initial_authorities:
        if authority.stash not in covered:
            logger.debug("Endowing authority stash %s", authority.stash)
            covered.append(authority.stash)
    return covered


def membership_prefix(accounts: Sequence[AccountId]) -> List[AccountId]:
    """First ceil(n / 2) accounts, order kept"""
    return list(accounts[:(len(accounts) + 1) // 2])


def testnet_genesis(
    initial_authorities: Sequence[AuthorityKeySet],
    root_key: AccountId,
    endowed_accounts: Optional[Sequence[AccountId]] = None,
    enable_println: bool = False,
    keyring: KeyDeriver = DEV_KEYRING,
    code: bytes = b"",
) -> GenesisRecord:
    """
    Assemble the genesis record for a set of authorities.

    Every authority stash ends up endowed exactly once. The consensus
    subsystems start with empty authority sets: session rotation
    activates the keys declared in the session config.
    """
    if endowed_accounts is None:
        endowed_accounts = default_endowed_accounts(keyring)
    endowed = cover_authority_stashes(endowed_accounts, initial_authorities)
    members = membership_prefix(endowed)
    n = len(initial_authorities)

    logger.info(
        "Assembling genesis: %d authorities, %d endowed accounts, %d members",
        n, len(endowed), len(members)
    )
    if n == 0:
        logger.warning("Genesis has no authorities; the chain cannot produce blocks")

    configs = {
        "system": SystemConfig(code=code),
        "balances": BalancesConfig(
            balances=[(account, ENDOWMENT) for account in endowed]
        ),
        "indices": IndicesConfig(),
        "session": SessionConfig(
            keys=[(a.stash, a.stash, a.session_keys()) for a in initial_authorities]
        ),
        "staking": StakingConfig(
            validator_count=n * 2,
            minimum_validator_count=n,
            stakers=[
                (a.stash, a.controller, STASH, StakerStatus.VALIDATOR)
                for a in initial_authorities
            ],
            invulnerables=[a.stash for a in initial_authorities],
            slash_reward_fraction=Perbill.from_percent(10),
        ),
        "democracy": DemocracyConfig(),
        "elections": ElectionsConfig(
            members=[(member, STASH) for member in members]
        ),
        "council": CollectiveConfig(members=list(members)),
        "technical_committee": CollectiveConfig(members=list(members)),
        # println should only be enabled on development chains
        "contracts": ContractsConfig(
            current_schedule=Schedule(enable_println=enable_println)
        ),
        "sudo": SudoConfig(key=root_key),
        "babe": BabeConfig(authorities=[], epoch_config=BABE_GENESIS_EPOCH_CONFIG),
        "im_online": ImOnlineConfig(keys=[]),
        "authority_discovery": AuthorityDiscoveryConfig(keys=[]),
        "grandpa": GrandpaConfig(authorities=[]),
        "technical_membership": MembershipConfig(),
        "treasury": TreasuryConfig(),
        "society": SocietyConfig(members=list(members), pot=0),
        "vesting": VestingConfig(),
        "gilt": GiltConfig(),
    }
    return GenesisRecord(configs)
