"""Session manager pallet: keeps the committee of authorities and validators."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .migrations import migrate
from .primitives import (
    DEFAULT_MILLISECS_PER_BLOCK,
    DEFAULT_SESSION_PERIOD,
    KEY_TYPE,
    ApiError,
)

log = logging.getLogger("pallet_aleph")

VALIDATORS = "Validators"
SESSION_FOR_VALIDATORS_CHANGE = "SessionForValidatorsChange"
AUTHORITIES = "Authorities"
SESSION_PERIOD = "SessionPeriod"
MILLISECS_PER_BLOCK = "MillisecsPerBlock"


class Origin(Enum):
    """Origin of a dispatched call."""

    ROOT = "root"
    SIGNED = "signed"
    NONE = "none"


class BadOrigin(Exception):
    """The call was dispatched from an origin that is not allowed."""


@dataclass(frozen=True)
class DbWeight:
    """Weight of a single database read and write."""

    read: int = 25_000_000
    write: int = 100_000_000

    def reads(self, n: int) -> int:
        return self.read * n

    def writes(self, n: int) -> int:
        return self.write * n


@dataclass(frozen=True)
class ChangeValidators:
    """Event emitted when a validator change is scheduled."""

    validators: tuple
    session_for_validators_change: int


@dataclass
class GenesisConfig:
    """Initial values of the pallet's storage."""

    authorities: list = field(default_factory=list)
    session_period: int = DEFAULT_SESSION_PERIOD
    millisecs_per_block: int = DEFAULT_MILLISECS_PER_BLOCK


class AlephPallet:
    """State and calls of the session manager pallet."""

    STORAGE_VERSION = 1

    def __init__(self, genesis: GenesisConfig | None = None, db_weight: DbWeight | None = None) -> None:
        genesis = genesis if genesis is not None else GenesisConfig()
        self.db_weight = db_weight if db_weight is not None else DbWeight()
        self.storage: dict[str, Any] = {}
        self.on_chain_storage_version = 0
        self.events: list[ChangeValidators] = []
        self.storage[SESSION_PERIOD] = genesis.session_period
        self.storage[MILLISECS_PER_BLOCK] = genesis.millisecs_per_block

    @property
    def validators(self) -> list | None:
        return self.storage.get(VALIDATORS)

    @property
    def session_for_validators_change(self) -> int | None:
        return self.storage.get(SESSION_FOR_VALIDATORS_CHANGE)

    @property
    def authorities(self) -> list:
        return list(self.storage.get(AUTHORITIES, []))

    @property
    def session_period(self) -> int:
        return self.storage.get(SESSION_PERIOD, DEFAULT_SESSION_PERIOD)

    @property
    def millisecs_per_block(self) -> int:
        return self.storage.get(MILLISECS_PER_BLOCK, DEFAULT_MILLISECS_PER_BLOCK)

    def change_validators(self, origin: Origin, validators: Iterable, session_for_validators_change: int) -> None:
        """Schedule a new validator set from the given session on; root only."""
        if origin is not Origin.ROOT:
            raise BadOrigin(f"change_validators requires root origin, got {origin.value}")
        validators = list(validators)
        self.storage[VALIDATORS] = list(validators)
        self.storage[SESSION_FOR_VALIDATORS_CHANGE] = session_for_validators_change
        self.events.append(ChangeValidators(tuple(validators), session_for_validators_change))

    def initialize_authorities(self, authorities: Iterable) -> None:
        """Set the authorities once; a non-empty set may not be replaced."""
        authorities = list(authorities)
        if not authorities:
            return
        if self.storage.get(AUTHORITIES):
            raise RuntimeError("Authorities are already initialized!")
        self.storage[AUTHORITIES] = authorities

    def update_authorities(self, authorities: Iterable) -> None:
        self.storage[AUTHORITIES] = list(authorities)

    def next_session_authorities(self, queued_keys: Iterable[tuple[Any, Mapping[bytes, Any]]]) -> list:
        """Authority ids from the session keys queued for the next session."""
        result = []
        for _, keys in queued_keys:
            if KEY_TYPE not in keys:
                raise ApiError.decode_key()
            result.append(keys[KEY_TYPE])
        return result

    def on_genesis_session(self, validators: Iterable[tuple[Any, Any]]) -> None:
        self.initialize_authorities(key for _, key in validators)

    def on_new_session(self, changed: bool, validators: Iterable[tuple[Any, Any]], queued_validators: Iterable[tuple[Any, Any]]) -> None:
        self.update_authorities(key for _, key in validators)

    def on_runtime_upgrade(self) -> int:
        return migrate(self)


class AlephSessionManager:
    """Hands the scheduled validator set to the session machinery."""

    def __init__(self, pallet: AlephPallet) -> None:
        self.pallet = pallet
        self.active_session: int | None = None

    def new_session(self, session: int) -> list | None:
        change_at = self.pallet.session_for_validators_change
        if change_at is None or change_at > session:
            return None
        storage = self.pallet.storage
        if VALIDATORS not in storage:
            raise RuntimeError("When SessionForValidatorsChange is Some so should be Validators")
        validators = storage.pop(VALIDATORS)
        storage.pop(SESSION_FOR_VALIDATORS_CHANGE)
        return validators

    def start_session(self, session: int) -> None:
        """Record the session that has just started."""
        self.active_session = session

    def end_session(self, session: int) -> None:
        """Forget the active session once it ends."""
        if self.active_session == session:
            self.active_session = None