import hashlib

import pytest

from seed_keys import (
    AccountId,
    AuthorityDiscoveryId,
    BabeId,
    GrandpaId,
    ImOnlineId,
    KeyDeriver,
)


class FakeKeyring(KeyDeriver):
    """Deterministic keys without any curve arithmetic"""

    @staticmethod
    def _raw(tag: str, seed: str) -> bytes:
        return hashlib.sha256(f"{tag}:{seed}".encode()).digest()

    def account_id(self, seed):
        return AccountId(self._raw("acco", seed))

    def grandpa(self, seed):
        return GrandpaId(self._raw("gran", seed))

    def babe(self, seed):
        return BabeId(self._raw("babe", seed))

    def im_online(self, seed):
        return ImOnlineId(self._raw("imon", seed))

    def authority_discovery(self, seed):
        return AuthorityDiscoveryId(self._raw("audi", seed))


@pytest.fixture
def keyring():
    return FakeKeyring()


@pytest.fixture(autouse=True)
def no_runtime_code(monkeypatch):
    monkeypatch.delenv("GENESIS_RUNTIME_CODE", raising=False)
