from dataclasses import dataclass, fields
from typing import Tuple

from seed_keys import (
    DEV_KEYRING,
    AccountId,
    AuthorityDiscoveryId,
    BabeId,
    GrandpaId,
    ImOnlineId,
    KeyDeriver,
    account_id_from_hex,
    public_from_hex,
)


@dataclass(frozen=True)
class SessionKeys:
    """Per-validator keys registered for one session"""
    grandpa: GrandpaId
    babe: BabeId
    im_online: ImOnlineId
    authority_discovery: AuthorityDiscoveryId


def session_keys(
    grandpa: GrandpaId,
    babe: BabeId,
    im_online: ImOnlineId,
    authority_discovery: AuthorityDiscoveryId,
) -> SessionKeys:
    return SessionKeys(grandpa, babe, im_online, authority_discovery)


@dataclass(frozen=True)
class AuthorityKeySet:
    """
    Everything needed to register one validator.
    Built once, never modified.
    """
    stash: AccountId
    controller: AccountId
    grandpa: GrandpaId
    babe: BabeId
    im_online: ImOnlineId
    authority_discovery: AuthorityDiscoveryId

    def __post_init__(self):
        """Each slot holds its own key type, no swaps"""
        for f in fields(self):
            value = getattr(self, f.name)
            if type(value) is not f.type:
                raise TypeError(
                    f"{f.name} must be {f.type.__name__}, got {type(value).__name__}"
                )

    @classmethod
    def from_tuple(cls, keys: Tuple) -> "AuthorityKeySet":
        """(stash, controller, grandpa, babe, im_online, authority_discovery)"""
        if len(keys) != len(fields(cls)):
            raise ValueError(f"Authority tuple must have 6 entries, got {len(keys)}")
        return cls(*keys)

    def session_keys(self) -> SessionKeys:
        return session_keys(self.grandpa, self.babe, self.im_online, self.authority_discovery)


def authority_keys_from_seed(seed: str, keyring: KeyDeriver = DEV_KEYRING) -> AuthorityKeySet:
    """Generate stash, controller and session keys from seed"""
    return AuthorityKeySet(
        stash=keyring.account_id(f"{seed}//stash"),
        controller=keyring.account_id(seed),
        grandpa=keyring.grandpa(seed),
        babe=keyring.babe(seed),
        im_online=keyring.im_online(seed),
        authority_discovery=keyring.authority_discovery(seed),
    )


def authority_keys_from_hex(
    stash: str,
    controller: str,
    grandpa: str,
    babe: str,
    im_online: str,
    authority_discovery: str,
) -> AuthorityKeySet:
    """Authority set from pre-generated key material"""
    return AuthorityKeySet(
        stash=account_id_from_hex(stash),
        controller=account_id_from_hex(controller),
        grandpa=public_from_hex(grandpa, GrandpaId),
        babe=public_from_hex(babe, BabeId),
        im_online=public_from_hex(im_online, ImOnlineId),
        authority_discovery=public_from_hex(authority_discovery, AuthorityDiscoveryId),
    )
