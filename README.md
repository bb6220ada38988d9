# alephkit

Building blocks for operating an Aleph-style blockchain node: the session
pallet that tracks validators and authorities, its storage migration,
consensus timing helpers, the lifecycle of the asyncio tasks an authority
runs in a session, a chain-spec forker and the option parser of a
transaction flooder.

The package uses the standard library only.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | Purpose |
| --- | --- |
| `alephkit.primitives` | Shared constants (`KEY_TYPE`, `ALEPH_ENGINE_ID`, `DEFAULT_SESSION_PERIOD`, `DEFAULT_MILLISECS_PER_BLOCK`, ...) and `ApiError`. |
| `alephkit.pallet` | `AlephPallet`, `AlephSessionManager`, `GenesisConfig`, `Origin`, `BadOrigin`, `DbWeight`, `ChangeValidators`. |
| `alephkit.migrations` | `migrate(pallet)`: moves pallet storage from version 0 to version 1. |
| `alephkit.twox` | `xxh64(data, seed)` and `twox_128(data)`. |
| `alephkit.fork_off` | Copies selected storage from a live chain into a fork's genesis spec; the `alephkit-fork-off` command. |
| `alephkit.flooder_config` | `FlooderConfig`, `parse_config(argv)` and `read_phrase(phrase)`. |
| `alephkit.tasks` | `Task`, `AuthorityTask`, `Subtasks`, `SubtaskCommon`. |
| `alephkit.delays` | `exponential_slowdown(...)` and `JustificationRequestDelay`. |

## The session pallet

```python
from alephkit.pallet import AlephPallet, AlephSessionManager, GenesisConfig, Origin

pallet = AlephPallet(GenesisConfig(), None)   # None: default DbWeight
pallet.change_validators(Origin.ROOT, [1, 2, 3], 5)

manager = AlephSessionManager(pallet)
manager.new_session(4)   # None: the change is scheduled for session 5
manager.new_session(5)   # [1, 2, 3], and the scheduled change is cleared
```

Only `Origin.ROOT` may change validators; any other origin raises
`BadOrigin`. Each change is recorded as a `ChangeValidators` event in
`pallet.events`. Authorities can be initialised once with
`initialize_authorities` (a second non-empty set raises `RuntimeError`) and
are replaced on each new session through `on_new_session`.
`next_session_authorities(queued_keys)` picks the `KEY_TYPE` key out of each
queued `(validator, keys)` pair and raises `ApiError` (`DecodeKey`) when one
is missing.

`alephkit.migrations.migrate(pallet)` (also reached through
`pallet.on_runtime_upgrade()`) brings version-0 storage up to version 1 and
returns the weight of the reads and writes it made, as computed by the
pallet's `DbWeight`. Run a second time it only reads the storage version and
returns `db_weight.reads(1)`.

## Forking a chain

`alephkit-fork-off` fetches the full state of a running chain over JSON-RPC
(`state_getPairs`) and copies the runtime code and the storage items under
the chosen prefixes into `genesis.raw.top` of the fork's chain spec, then
writes the result as compact JSON.

```
alephkit-fork-off \
    --http-rpc-endpoint http://127.0.0.1:9933 \
    --fork-spec-path ../docker/data/chainspec.json \
    --write-to-path ../docker/data/chainspec.fork.json \
    --prefixes Aura Aleph
```

The endpoint and paths shown are the defaults; without `--prefixes` the
single prefix `"Aura, Aleph"` is used. The steps are available as functions
too: `parse_args`, `get_chain_state`, `select_storage`, `apply_fork`,
`prefix_as_hex` and `write_to_file`.

## Flooder configuration

`parse_config(argv)` reads the flooder's options (`--nodes`,
`--transactions`, `--phrase` or `--seed` but not both, `--threads`,
`--transactions-in-interval`, `--interval-secs` and the rest) into a
`FlooderConfig`. `FlooderConfig.rate_limiting()` returns the
`(transactions_in_interval, interval_secs)` pair, `None` when neither is
set, and raises `ValueError` when only one of them is. `read_phrase` returns
the contents of a file, trailing whitespace removed, when given a path to
one, and the phrase itself otherwise.

## Tasks

`Task` wraps an awaitable together with an exit future: `stop()` sets the
future and waits for the task to finish, `stopped()` waits for it to end on
its own. `AuthorityTask` does the same and returns its node index from
`stopped()`. `Subtasks.failed()` waits until either its exit future is done
(returns `False`) or one of the member, aggregator, forwarder, refresher and
data-store tasks ends (returns `True`), then stops them all in that order.

## Consensus timing

```python
from alephkit.delays import exponential_slowdown

exponential_slowdown(10, 4000.0, 0, 2.0)   # delay in milliseconds, an int
```

The result is `base_delay` for rounds before `start_exp_delay` and grows by
a factor of `exp_base` per round afterwards, rounded and capped at the
largest unsigned 64-bit value.

`JustificationRequestDelay(session_period, millisecs_per_block, clock)`
allows a justification request once more than
`min(2 * millisecs_per_block, millisecs_per_block * session_period // 10)`
milliseconds have passed since the last finalized block and more than twice
that since the last request.

## What this package does not do

It is not a node. It does not run consensus, sign or verify anything, hold
a keystore, talk to peers or import blocks; the pallet keeps its storage in
memory. The flooder part is its option parser only: there is no command
that builds, signs or sends transactions.