import pytest

from seed_keys import (
    AccountId,
    AuthorityDiscoveryId,
    BabeId,
    GrandpaId,
    ImOnlineId,
    InvalidKeyMaterial,
    InvalidSeed,
    PublicKey,
    account_id_from_hex,
    account_id_from_public,
    chain_code,
    get_account_id_from_seed,
    get_from_seed,
    parse_path,
    public_from_hex,
)

ALICE_HEX = "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"
BOB_HEX = "8eaf04151687736326c9fea17e25fc5287613693c912909cb226aa4794f26a48"
ALICE_GRANDPA_HEX = "88dc3417d5058ec4b4503e0c12ea1a0a89be200fe98922423d4334014fa6b0ee"


def test_alice_matches_substrate_keyring():
    alice = get_account_id_from_seed("Alice")
    assert alice.raw.hex() == ALICE_HEX
    assert alice.to_ss58() == "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"


def test_bob_matches_substrate_keyring():
    assert get_account_id_from_seed("Bob").raw.hex() == BOB_HEX


def test_alice_grandpa_is_ed25519_dev_key():
    assert get_from_seed("Alice", GrandpaId).raw.hex() == ALICE_GRANDPA_HEX


def test_same_seed_same_key():
    assert get_from_seed("Alice", GrandpaId) == get_from_seed("Alice", GrandpaId)
    assert get_account_id_from_seed("Bob") == get_account_id_from_seed("Bob")


def test_different_seeds_differ():
    assert get_account_id_from_seed("Alice") != get_account_id_from_seed("Bob")
    assert get_account_id_from_seed("Alice") != get_account_id_from_seed("Alice//stash")


def test_sr25519_roles_share_bytes_but_not_identity():
    account = get_from_seed("Alice", PublicKey)
    babe = get_from_seed("Alice", BabeId)
    im_online = get_from_seed("Alice", ImOnlineId)
    discovery = get_from_seed("Alice", AuthorityDiscoveryId)
    assert account.raw == babe.raw == im_online.raw == discovery.raw
    assert babe != im_online
    assert im_online != discovery
    assert get_from_seed("Alice", GrandpaId).raw != babe.raw


def test_public_keys_are_32_bytes():
    key = get_from_seed("Charlie", BabeId)
    assert isinstance(key, BabeId)
    assert len(key.raw) == 32


def test_parse_path():
    assert parse_path("//Alice") == [(True, "Alice")]
    assert parse_path("//Alice//stash") == [(True, "Alice"), (True, "stash")]
    assert parse_path("//Alice/soft") == [(True, "Alice"), (False, "soft")]


def test_chain_code():
    assert chain_code("Alice") == bytes([5 << 2]) + b"Alice" + bytes(26)
    assert chain_code("1") == (1).to_bytes(8, "little") + bytes(24)
    assert len(chain_code("x" * 40)) == 32


@pytest.mark.parametrize("seed", ["", "Alice////x", "Alice//", "/Alice"])
def test_malformed_seed_fails(seed):
    with pytest.raises(InvalidSeed):
        get_account_id_from_seed(seed)


def test_soft_junction_is_sr25519_only():
    assert get_account_id_from_seed("Alice/soft") != get_account_id_from_seed("Alice")
    with pytest.raises(InvalidSeed):
        get_from_seed("Alice/soft", GrandpaId)


def test_only_account_keys_sign_for_accounts():
    with pytest.raises(TypeError):
        account_id_from_public(get_from_seed("Alice", GrandpaId))


def test_account_ids_are_ordered():
    low = AccountId(bytes(32))
    high = AccountId(bytes([1]) + bytes(31))
    assert sorted([high, low]) == [low, high]


def test_ss58_known_address():
    alice = account_id_from_hex(ALICE_HEX)
    assert alice.to_ss58() == "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"


def test_ss58_format_changes_address():
    alice = account_id_from_hex(ALICE_HEX)
    assert alice.to_ss58(101) != alice.to_ss58(42)
    assert public_from_hex(ALICE_HEX, BabeId).to_ss58() == alice.to_ss58()


def test_hex_with_and_without_prefix():
    assert account_id_from_hex("0x" + ALICE_HEX) == account_id_from_hex(ALICE_HEX)
    assert str(public_from_hex(ALICE_HEX, GrandpaId)) == "0x" + ALICE_HEX


@pytest.mark.parametrize("value", ["abcd", ALICE_HEX + "00", "zz" * 32])
def test_bad_hex_fails(value):
    with pytest.raises(InvalidKeyMaterial):
        public_from_hex(value, BabeId)


def test_wrong_length_account_fails():
    with pytest.raises(InvalidKeyMaterial):
        AccountId(b"\x00" * 31)
