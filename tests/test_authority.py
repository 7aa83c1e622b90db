import pytest

from authority import (
    AuthorityKeySet,
    SessionKeys,
    authority_keys_from_hex,
    authority_keys_from_seed,
)
from seed_keys import BabeId, GrandpaId, get_account_id_from_seed


def test_seed_authority_uses_stash_path(keyring):
    auth = authority_keys_from_seed("Alice", keyring)
    assert auth.stash == keyring.account_id("Alice//stash")
    assert auth.controller == keyring.account_id("Alice")
    assert auth.grandpa == keyring.grandpa("Alice")
    assert auth.authority_discovery == keyring.authority_discovery("Alice")


def test_real_derivation_matches_helpers():
    auth = authority_keys_from_seed("Bob")
    assert auth.stash == get_account_id_from_seed("Bob//stash")
    assert auth.controller == get_account_id_from_seed("Bob")
    assert auth.stash != auth.controller


def test_session_keys_bundle(keyring):
    auth = authority_keys_from_seed("Dave", keyring)
    keys = auth.session_keys()
    assert keys == SessionKeys(auth.grandpa, auth.babe, auth.im_online, auth.authority_discovery)


def test_from_tuple_roundtrip(keyring):
    auth = authority_keys_from_seed("Eve", keyring)
    as_tuple = (
        auth.stash, auth.controller, auth.grandpa,
        auth.babe, auth.im_online, auth.authority_discovery,
    )
    assert AuthorityKeySet.from_tuple(as_tuple) == auth


def test_from_tuple_wrong_arity(keyring):
    auth = authority_keys_from_seed("Eve", keyring)
    with pytest.raises(ValueError):
        AuthorityKeySet.from_tuple((auth.stash, auth.controller, auth.grandpa, auth.babe, auth.im_online))


def test_swapped_consensus_keys_rejected(keyring):
    with pytest.raises(TypeError):
        AuthorityKeySet(
            stash=keyring.account_id("x//stash"),
            controller=keyring.account_id("x"),
            grandpa=keyring.babe("x"),
            babe=keyring.grandpa("x"),
            im_online=keyring.im_online("x"),
            authority_discovery=keyring.authority_discovery("x"),
        )


def test_from_hex():
    auth = authority_keys_from_hex(*(["11" * 32] * 2 + ["22" * 32] * 4))
    assert auth.stash == auth.controller
    assert isinstance(auth.grandpa, GrandpaId)
    assert isinstance(auth.babe, BabeId)
    assert auth.grandpa.raw == auth.babe.raw
