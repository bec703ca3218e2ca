"""Tests for dashboard chart builders."""

from config import UIConfig
from ui.charts import outcome_doughnut, pair_win_rate_bar


def test_outcome_doughnut(store, statistics, make_trade_data):
    store.save_trade(make_trade_data(status="WIN"))
    store.save_trade(make_trade_data(status="WIN"))
    store.save_trade(make_trade_data(status="OPEN"))

    fig = outcome_doughnut(statistics.get_dashboard_stats())
    pie = fig.data[0]

    assert list(pie.labels) == ['Wins', 'Losses', 'Open']
    assert list(pie.values) == [2, 0, 1]


def test_outcome_doughnut_colors():
    config = UIConfig(win_color="#000001", loss_color="#000002", open_color="#000003")
    stats = {'winning_trades': 0, 'losing_trades': 0, 'open_trades': 0}

    fig = outcome_doughnut(stats, config)

    assert list(fig.data[0].marker.colors) == ["#000001", "#000002", "#000003"]


def test_pair_win_rate_bar(store, statistics, make_trade_data):
    store.save_trade(make_trade_data(currencyPair="EUR/USD", status="WIN"))
    store.save_trade(make_trade_data(currencyPair="GBP/USD", status="LOSS"))

    fig = pair_win_rate_bar(statistics.performance_table())
    bar = fig.data[0]

    # Most recent trade first
    assert list(bar.x) == ["GBP/USD", "EUR/USD"]
    assert list(bar.y) == [0.0, 100.0]
    assert tuple(fig.layout.yaxis.range) == (0, 100)


def test_pair_win_rate_bar_empty(statistics):
    fig = pair_win_rate_bar(statistics.performance_table())

    assert not fig.data[0].x
