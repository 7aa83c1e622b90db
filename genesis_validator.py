from typing import Mapping

from genesis_builder import ENDOWMENT, STASH, SUBSYSTEMS, StakerStatus

CONSENSUS_BOOTSTRAP = {
    "babe": "authorities",
    "grandpa": "authorities",
    "im_online": "keys",
    "authority_discovery": "keys",
}


def validate_genesis(genesis: Mapping) -> None:
    """
    Raises ValueError if the genesis record breaks an invariant.
    This is a hard gate. No silent fixes.
    """

    missing = set(SUBSYSTEMS) - set(genesis.keys())
    if missing:
        raise ValueError(f"Genesis missing subsystems: {sorted(missing)}")

    # Balances: each endowed account once, each for the full endowment
    balances = genesis["balances"].balances
    accounts = [account for account, _ in balances]
    if len(set(accounts)) != len(accounts):
        raise ValueError("Duplicate account in balances")
    wrong = [str(account) for account, amount in balances if amount != ENDOWMENT]
    if wrong:
        raise ValueError(f"Accounts not endowed with ENDOWMENT: {wrong}")

    staking = genesis["staking"]
    n = len(staking.stakers)
    if staking.validator_count != 2 * n:
        raise ValueError(f"validator_count {staking.validator_count} != 2 x {n}")
    if staking.minimum_validator_count != n:
        raise ValueError(f"minimum_validator_count {staking.minimum_validator_count} != {n}")

    endowed = set(accounts)
    stashes = []
    for stash, _, bond, status in staking.stakers:
        if stash not in endowed:
            raise ValueError(f"Staker stash {stash} is not endowed")
        if bond != STASH or status is not StakerStatus.VALIDATOR:
            raise ValueError(f"Staker {stash} must bond STASH as a validator")
        stashes.append(stash)

    if list(staking.invulnerables) != stashes:
        raise ValueError("Invulnerables must be exactly the staker stashes")

    # Session binds (stash, stash, keys) for the same stashes, same order
    session_accounts = [account for account, _, _ in genesis["session"].keys]
    if session_accounts != stashes:
        raise ValueError("Session keys and stakers disagree on validator stashes")
    if any(account != validator for account, validator, _ in genesis["session"].keys):
        raise ValueError("Session owner must equal validator id")

    # Memberships are the prefix of the endowed sequence
    prefix = accounts[:(len(accounts) + 1) // 2]
    for name in ("council", "technical_committee", "society"):
        if list(genesis[name].members) != prefix:
            raise ValueError(f"{name} membership is not the endowed prefix")

    # Consensus sets are activated by session rotation, never at genesis
    for name, attr in CONSENSUS_BOOTSTRAP.items():
        if getattr(genesis[name], attr):
            raise ValueError(f"{name} must start with an empty {attr} set")
