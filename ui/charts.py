"""
Plotly figures for the dashboard.
"""
from typing import Any, Dict, Optional

import pandas as pd
import plotly.graph_objects as go

from config import ui_config, UIConfig


def outcome_doughnut(stats: Dict[str, Any], config: Optional[UIConfig] = None) -> go.Figure:
    """Wins / losses / open as a doughnut."""
    config = config or ui_config

    fig = go.Figure(go.Pie(
        labels=['Wins', 'Losses', 'Open'],
        values=[stats['winning_trades'], stats['losing_trades'], stats['open_trades']],
        hole=0.5,
        marker={'colors': [config.win_color, config.loss_color, config.open_color]},
        sort=False,
    ))
    fig.update_layout(
        title={'text': "Trade Outcomes"},
        legend={'orientation': 'h', 'y': -0.1},
        margin={'t': 50, 'b': 20, 'l': 20, 'r': 20},
    )
    return fig


def pair_win_rate_bar(table: pd.DataFrame, config: Optional[UIConfig] = None) -> go.Figure:
    """Win rate per currency pair, 0-100%."""
    config = config or ui_config

    fig = go.Figure(go.Bar(
        x=list(table.index),
        y=list(table['win_rate']) if 'win_rate' in table.columns else [],
        name='Win Rate %',
        marker={'color': config.bar_color},
    ))
    fig.update_layout(
        title={'text': "Win Rate by Pair"},
        yaxis={'range': [0, 100], 'title': 'Win Rate %'},
        margin={'t': 50, 'b': 20, 'l': 20, 'r': 20},
    )
    return fig
