# bdjuno

Building blocks for indexing a Cosmos-based chain into a database. The
package reads chain data (genesis documents, blocks, transactions and their
events) and turns it into plain records that a database layer can store:
validators, delegations, signing infos, staking pools, mint and slashing
parameters and more.

The package does not talk to a node or a database by itself. Each module
takes a *source* (an object that answers queries about the chain at a given
height) and a *db* object (an object that stores records), so it can be
plugged into any node client and any storage backend. It has no
dependencies outside the standard library.

## What is inside

- `bdjuno.models`, `bdjuno.gov_types`, `bdjuno.staking_types`: frozen
  dataclasses for the records that get stored, such as `Coin`, `Account`,
  `Genesis`, `ValidatorSigningInfo`, `Pool`, `TokenPrice`, `Delegation`,
  `Redelegation`, `ValidatorStatus`, `Proposal` and `TallyResult`.
- `bdjuno.events`: `Event`, `Attribute`, `MessageLog`, `Tx` and the helpers
  `find_events_by_type` and `find_attribute_by_key`.
- `bdjuno.addresses`: `bech32_encode`, `bech32_decode`,
  `acc_address_from_bech32` and `filter_non_account_addresses`.
- `bdjuno.utils`: `remove_duplicate_values`, `unique_addresses_parser`,
  `query_txs` (paged transaction search, 100 per page) and `read_genesis`
  (from a JSON file, or from a node when no file is given).
- `bdjuno.tasks`: a small `Scheduler` for periodic jobs and `watch_method`,
  which runs a callable in a background thread and logs any exception it
  raises.
- `bdjuno.keybase`: `get_avatar_url` and `avatar_url_from_response`, for
  validator avatars looked up by identity.
- Chain modules:
  - `bdjuno.mint.MintModule` stores mint parameters from the genesis and on
    request, and registers a daily inflation update at midnight.
  - `bdjuno.slashing.SlashingModule` stores signing infos on every block,
    stores slashing parameters, and refreshes the delegations of slashed
    validators through a staking module.
  - `bdjuno.enabled_modules.EnabledModulesModule` stores the names of the
    enabled modules.
  - `bdjuno.staking.delegations.DelegationsMixin` and
    `bdjuno.staking.validators.ValidatorsMixin` hold the staking operations:
    refreshing delegations, storing redelegations and unbonding delegations
    from messages, converting validators, computing statuses and voting
    powers, and `handle_msg` for the staking messages (`MsgCreateValidator`,
    `MsgEditValidator`, `MsgDelegate`, `MsgBeginRedelegate`,
    `MsgUndelegate`). A class using them provides `source`, `db`,
    `distr_module` and `slashing_module` attributes.

## Examples

Removing duplicated addresses while keeping their first-seen order:

```python
from bdjuno.utils import remove_duplicate_values

remove_duplicate_values(["a", "b", "a", "c", "b"])
# ['a', 'b', 'c']
```

Keeping only account addresses out of a mix of account and validator
addresses:

```python
from bdjuno.addresses import filter_non_account_addresses

accounts = filter_non_account_addresses(addresses, "cosmos")
```

Searching transaction events:

```python
from bdjuno.events import find_events_by_type, find_attribute_by_key

for event in find_events_by_type(events, "slash"):
    print(find_attribute_by_key(event, "address").value)
```

Scheduling periodic work:

```python
from bdjuno.tasks import Scheduler

scheduler = Scheduler()
scheduler.every(30, refresh)          # first check, then every 30 seconds
mint_module.register_periodic_operations(scheduler)  # daily at 00:00

# call regularly from the indexer's main loop
scheduler.run_pending(now)
```

## Errors

Failures are raised as exceptions: `AddressError` for malformed bech32
addresses or wrong prefixes, `EventNotFoundError` when an expected event or
attribute is missing, `GenesisError` when a genesis document cannot be read,
`KeybaseError` when an avatar lookup fails, and `SlashingError` and
`StakingError` for failures in those modules.

## What the package does not do

There is no command to run and no indexing loop: the package does not
connect to a node, fetch blocks, or store anything on its own. It has no
price feed client, and the staking operations come as mixins without a
ready-made staking module that handles whole blocks or the staking part of
a genesis document; those have to be assembled by the application.