"""Storage migrations of the session manager pallet."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

log = logging.getLogger("pallet_aleph")

_U32_MAX = 2**32 - 1


def _is_optional_u32(value: Any) -> bool:
    return value is None or (
        isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U32_MAX
    )


def _is_optional_list(value: Any) -> bool:
    return value is None or isinstance(value, (list, tuple))


def _translate(storage: dict, key: str, decodes: Callable[[Any], bool]) -> bool:
    """Rewrite an ``Option<T>`` value stored under ``key`` as a plain ``T``.

    A missing or empty value leaves the key removed. Returns False and leaves
    storage untouched when the stored value cannot be read in the old format.
    """
    if key not in storage:
        log.info("Current storage value for %s None", key)
        return True
    old = storage[key]
    if not decodes(old):
        return False
    log.info("Current storage value for %s %r", key, old)
    if old is None:
        del storage[key]
    else:
        storage[key] = old
    return True


def migrate(pallet) -> int:
    """Migrate storage from version 0 to 1 and return the weight used."""
    on_chain = pallet.on_chain_storage_version
    current = pallet.STORAGE_VERSION
    weight = pallet.db_weight

    if on_chain != 0 or current != 1:
        log.warning(
            "Not applying any storage migration because on-chain storage version is %s "
            "and the version declared in the aleph pallet is %s",
            on_chain,
            current,
        )
        return weight.reads(1)

    log.info("Running migration from STORAGE_VERSION 0 to 1")
    writes = 0

    if _translate(pallet.storage, "SessionForValidatorsChange", _is_optional_u32):
        writes += 1
        log.info("Succesfully migrated storage for SessionForValidatorsChange")
    else:
        log.error("Something went wrong during the migration of SessionForValidatorsChange")

    if _translate(pallet.storage, "Validators", _is_optional_list):
        writes += 1
        log.info("Succesfully migrated storage for Validators")
    else:
        log.error("Something went wrong during the migration of Validators storage")

    pallet.on_chain_storage_version = 1
    writes += 1

    return weight.reads(3) + weight.writes(writes)