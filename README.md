# mev_scalpel

Tools for finding arbitrage cycles across Solana AMM liquidity pools.

The package builds a market graph. Tokens are its nodes and pools are its
edges. Each edge is priced with a test swap of 1,000,000,000 units. The
package then searches the graph for a negative-weight cycle, which is a
profitable round trip. When it finds one, it searches for the trade size
that gives the largest profit along that cycle.

## What is inside

- `mev_scalpel.decoders`
  - `Pubkey` is a 32-byte address. It has `Pubkey.from_base58(text)`,
    `Pubkey.new_unique()` and a base58 `str()`.
  - `RaydiumAmmPool` and `RaydiumClmmPool` are pool models. Both have
    `mints()` and `quote(token_in_mint, amount_in)`.
  - `RaydiumAmmPool.quote` prices a constant-product swap with a 0.25 % fee.
    It raises `PoolError` when a reserve is zero, when the input token is
    not in the pool, or when the input amount is too large.
  - `RaydiumClmmPool.quote` does not model concentrated-liquidity pricing.
    It checks the request and returns 0.
  - `decode_raydium_amm(pool_id, data)` reads the trailing AmmInfo record
    of a Raydium AMM v4 account into a `RaydiumAmmPool`. The reserves of
    the returned pool are zero. It raises `PoolError` if the data is too
    short.
- `mev_scalpel.state`
  - `MarketGraph` holds `token_map` (mint to node index) and `nodes`, an
    adjacency list of `Edge`s.
  - Its methods are `add_token`, `add_pool` (adds an edge in each
    direction), `mint_of` and `pool_count`.
  - `AppState` holds the current graph. Use `load()` to read it and
    `store(graph)` to replace it as a whole.
- `mev_scalpel.rpc`
  - `RpcClient(url)` is a small JSON-RPC client. It can be used as a
    context manager. Its `get_multiple_accounts(pubkeys)` returns `Account`
    objects, with `None` for missing accounts.
  - It raises `RpcError` on failure.
  - `hydrate_single_pool(pool, rpc_client)` fills a pool's reserves from
    its two SPL token vault accounts.
- `mev_scalpel.spfa`
  - `find_negative_cycle(graph, start_node_idx)` runs SPFA over `-ln(rate)`
    edge weights.
  - It returns the node indices of a cycle, or `None`.
  - Only AMM pools are priced. Other edges count as unusable.
- `mev_scalpel.optimizer`
  - `ArbitrageStep` is one swap in a path.
  - `simulate_path_profit(initial_amount, path)` returns the gain, or a
    negative loss.
  - `find_optimal_amount(path, max_amount)` runs a ternary search (up to
    100 iterations) and returns `(amount, profit)`. The result is `(0, 0)`
    when no sampled amount is profitable.
- `mev_scalpel.graph_engine`
  - `build_hydrated_test_graph(rpc_client)` loads three fixed development
    pools (SOL-USDC, USDC-RAY, RAY-SOL) and hydrates them.
  - When both SOL and USDC are present, it adds a deliberately mispriced
    SOL-USDC pool (149 USDC per SOL) to the graph.
- `mev_scalpel.discovery`
  - `fetch_orca_pools(client=None)` and `fetch_raydium_pools(client=None)`
    are async functions. They page through the public pool listings.
  - They raise `DiscoveryError` on HTTP or format errors.
- `mev_scalpel.market_discovery`
  - `fetch_initial_markets(client=None)` fetches both listings at the same
    time and merges them into `GenericPoolInfo` records.
  - A source that fails is logged and skipped.
- `mev_scalpel.dev_runner`
  - `build_path_for_optimizer(graph, cycle_indices)` turns a cycle into
    `ArbitrageStep`s.
  - It also provides `main`, which is the `mev-scalpel-dev` command.

Progress messages from the optimizer and from discovery go through the
`logging` module.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

`Config.load()` first looks for a `.env` file. The search starts in the
working directory and moves up from there. It then reads the environment.
It needs:

```
SOLANA_RPC_URL=http://localhost:8899
```

If the value is missing, it raises `ConfigError`.

## Commands

```
mev-scalpel-dev
```

This command:

1. Builds the development graph from the configured RPC node and prints
   how many pools and tokens it holds.
2. Runs the negative-cycle search, starting from wrapped SOL.
3. If it finds a cycle, prints the optimal trade amount and the predicted
   profit in SOL. The search covers amounts up to 100 SOL.

It exits with status 1 if the configuration is missing or the RPC calls
fail.

```
mev-scalpel
```

Prints the bot's start and shutdown banners and exits.

## Using it as a library

```python
from mev_scalpel.config import Config
from mev_scalpel.rpc import RpcClient
from mev_scalpel.graph_engine import build_hydrated_test_graph
from mev_scalpel.spfa import find_negative_cycle
from mev_scalpel.dev_runner import build_path_for_optimizer
from mev_scalpel.optimizer import find_optimal_amount

config = Config.load()
with RpcClient(config.solana_rpc_url) as rpc_client:
    graph = build_hydrated_test_graph(rpc_client)
cycle = find_negative_cycle(graph, start_node_idx=0)
if cycle is not None:
    path = build_path_for_optimizer(graph, cycle)
    amount, profit = find_optimal_amount(path, 100 * 10**9)
```

Amounts are integers in the token's smallest unit (lamports for SOL).

## What it does not do

- It does not build, sign or send transactions. Any opportunity it finds
  is reported only.
- `mev-scalpel` does no scanning. It only prints its banners.
- The pools returned by `fetch_initial_markets` are not loaded into a
  graph. Graphs come from the fixed development pools only.
- Nothing keeps a graph up to date. `AppState` only holds whatever graph
  is stored in it.
- Concentrated-liquidity pools are not priced.