import pytest

from mev_scalpel.decoders import PoolError, Pubkey, RaydiumAmmPool
from mev_scalpel.optimizer import ArbitrageStep, find_optimal_amount, simulate_path_profit

RESERVE = 10**12


def make_pool(mint_a, mint_b, reserve_a, reserve_b):
    return RaydiumAmmPool(
        id=Pubkey.new_unique(),
        mint_a=mint_a,
        mint_b=mint_b,
        mint_a_reserve=reserve_a,
        mint_b_reserve=reserve_b,
        base_vault=Pubkey.new_unique(),
        quote_vault=Pubkey.new_unique(),
    )


@pytest.fixture
def triangle():
    x, y, z = Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()
    xy = make_pool(x, y, RESERVE, RESERVE)
    yz = make_pool(y, z, RESERVE, RESERVE)
    zx = make_pool(z, x, RESERVE, 2 * RESERVE)
    profitable = [
        ArbitrageStep(xy, x, y),
        ArbitrageStep(yz, y, z),
        ArbitrageStep(zx, z, x),
    ]
    losing = [
        ArbitrageStep(zx, x, z),
        ArbitrageStep(yz, z, y),
        ArbitrageStep(xy, y, x),
    ]
    return profitable, losing


def test_zero_input_has_zero_profit(triangle):
    profitable, _ = triangle
    assert simulate_path_profit(0, profitable) == 0


def test_profitable_cycle_gains(triangle):
    profitable, _ = triangle
    assert simulate_path_profit(10**9, profitable) > 0


def test_reverse_cycle_loses(triangle):
    _, losing = triangle
    assert simulate_path_profit(10**9, losing) < 0


def test_mismatched_mints_rejected(triangle):
    profitable, _ = triangle
    broken = [profitable[0], profitable[2]]
    with pytest.raises(ValueError, match="Mismatched"):
        simulate_path_profit(10**9, broken)


def test_empty_path_rejected():
    with pytest.raises(ValueError, match="empty"):
        find_optimal_amount([], 10**9)
    with pytest.raises(ValueError, match="empty"):
        simulate_path_profit(10**9, [])


def test_pool_without_reserves_propagates_error():
    x, y = Pubkey.new_unique(), Pubkey.new_unique()
    pool = make_pool(x, y, 0, 0)
    path = [ArbitrageStep(pool, x, y), ArbitrageStep(pool, y, x)]
    with pytest.raises(PoolError):
        find_optimal_amount(path, 10**9)


def test_optimal_amount_beats_extremes(triangle):
    profitable, _ = triangle
    max_amount = RESERVE
    amount, profit = find_optimal_amount(profitable, max_amount)
    assert 0 < amount <= max_amount
    assert profit == simulate_path_profit(amount, profitable)
    assert profit > 0
    assert profit >= simulate_path_profit(max_amount, profitable)
    assert profit >= simulate_path_profit(1, profitable)


def test_losing_cycle_gives_nothing(triangle):
    _, losing = triangle
    assert find_optimal_amount(losing, RESERVE) == (0, 0)


def test_zero_budget(triangle):
    profitable, _ = triangle
    assert find_optimal_amount(profitable, 0) == (0, 0)