"""
FX Trade Journal - Streamlit Dashboard

Log trades, review them, and see how each currency pair is performing.
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import streamlit as st
import pandas as pd
from datetime import datetime
import logging

from config import journal_config, ui_config, paths
from core.kv_store import create_kv_store
from journal.models import TradeStatus, TradeType, ValidationError
from journal.trade_store import TradeStore, ALL
from journal.analytics import TradeStatistics
from recording.clip_capture import ClipCapture
from recording.recorder import VoiceRecorder
from recording.voice_notes import VoiceNoteArchive, voice_note_path
from ui.charts import outcome_doughnut, pair_win_rate_bar

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Page config
st.set_page_config(
    page_title=ui_config.page_title,
    page_icon="💱",
    layout="wide",
)

TABLE_COLUMNS = {
    'timestamp': 'Date',
    'currencyPair': 'Pair',
    'tradeType': 'Type',
    'entryPrice': 'Entry',
    'lotSize': 'Lot Size',
    'stopLoss': 'Stop Loss',
    'takeProfit': 'Take Profit',
    'exitPrice': 'Exit',
    'status': 'Status',
}


@st.cache_resource
def initialize_system():
    """Initialize the journal components (cached for the session)."""
    paths.ensure()
    store = TradeStore(create_kv_store())
    statistics = TradeStatistics(store)
    archive = VoiceNoteArchive()
    return store, statistics, archive


def format_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime('%Y-%m-%d %H:%M')
    except ValueError:
        return timestamp


def trades_frame(trades) -> pd.DataFrame:
    """Trades as a display table."""
    df = pd.DataFrame([t.to_dict() for t in trades], columns=list(TABLE_COLUMNS))
    df['timestamp'] = df['timestamp'].apply(format_date)
    return df.rename(columns=TABLE_COLUMNS).fillna('-')


def render_dashboard(statistics: TradeStatistics):
    """Render dashboard tab."""
    stats = statistics.get_dashboard_stats()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Trades", stats['total_trades'])
    with col2:
        st.metric("Winning Trades", stats['winning_trades'])
    with col3:
        st.metric("Losing Trades", stats['losing_trades'])
    with col4:
        st.metric("Win Rate", f"{stats['win_rate']}%")

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(outcome_doughnut(stats), use_container_width=True)
    with col2:
        st.plotly_chart(pair_win_rate_bar(statistics.performance_table()), use_container_width=True)

    st.subheader("Recent Trades")
    recent = statistics.get_recent_trades()

    if not recent:
        st.info("No trades yet. Add your first trade!")
        return

    for trade in recent:
        st.markdown(
            f"**{trade.currency_pair}** · {format_date(trade.timestamp)} · "
            f"{trade.trade_type.value} · Lot: {trade.lot_size} · `{trade.status.value}`"
        )


def render_add_pair(store: TradeStore):
    """Render the add currency pair form."""
    with st.expander("➕ Add Currency Pair"):
        with st.form("add_pair_form", clear_on_submit=True):
            new_pair = st.text_input("Currency pair", placeholder="EUR/USD")
            if st.form_submit_button("Save Pair"):
                if not new_pair.strip():
                    st.error("Please enter a currency pair.")
                elif store.add_currency_pair(new_pair):
                    st.success("Currency pair added successfully!")
                else:
                    st.error("Invalid format (e.g., EUR/USD) or currency pair already exists!")


def record_voice_note(clip: bytes, archive: VoiceNoteArchive):
    """Run the microphone widget's clip through the recorder."""
    recorder = VoiceRecorder(ClipCapture(clip), archive)
    if not recorder.start_recording():
        return None
    return asyncio.run(recorder.stop_recording())


def render_add_trade(store: TradeStore, archive: VoiceNoteArchive):
    """Render add trade tab."""
    render_add_pair(store)

    voice_clip = st.audio_input("🎤 Voice note (optional)")

    with st.form("trade_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            pair = st.selectbox("Currency Pair", store.get_currency_pairs())
            entry_price = st.number_input("Entry Price", value=None, min_value=0.0, format="%.5f")
            stop_loss = st.number_input("Stop Loss", value=None, min_value=0.0, format="%.5f")
            exit_price = st.number_input("Exit Price", value=None, min_value=0.0, format="%.5f",
                                         help="Required for closed trades (WIN or LOSS)")
        with col2:
            trade_type = st.selectbox("Trade Type", [t.value for t in TradeType])
            lot_size = st.number_input("Lot Size", value=None, min_value=0.0, format="%.2f")
            take_profit = st.number_input("Take Profit", value=None, min_value=0.0, format="%.5f")
            status = st.selectbox("Status", [s.value for s in TradeStatus])

        reason = st.text_area("Reason for trade")
        submitted = st.form_submit_button("Save Trade", type="primary")

    if not submitted:
        return

    payload = {
        'currency_pair': pair,
        'trade_type': trade_type,
        'entry_price': entry_price,
        'lot_size': lot_size,
        'stop_loss': stop_loss,
        'take_profit': take_profit,
        'exit_price': exit_price,
        'status': status,
        'reason': reason,
    }

    try:
        trade = store.save_trade(payload)
    except ValidationError as e:
        st.error(str(e))
        return

    if voice_clip is not None:
        note = record_voice_note(voice_clip.getvalue(), archive)
        if note is not None:
            store.update_trade(trade.id, {'voice_note': note.uri})
        else:
            st.warning("Voice note could not be read and was not attached.")

    st.success("Trade saved successfully!")


def render_trade_details(trade):
    """Render one trade in full."""
    col1, col2 = st.columns(2)
    with col1:
        st.write(f"**Currency Pair:** {trade.currency_pair}")
        st.write(f"**Trade Type:** {trade.trade_type.value}")
        st.write(f"**Status:** {trade.status.value}")
        st.write(f"**Date:** {format_date(trade.timestamp)}")
    with col2:
        st.write(f"**Entry Price:** {trade.entry_price}")
        st.write(f"**Lot Size:** {trade.lot_size}")
        st.write(f"**Stop Loss:** {trade.stop_loss or '-'}")
        st.write(f"**Take Profit:** {trade.take_profit or '-'}")
        if trade.exit_price is not None:
            st.write(f"**Exit Price:** {trade.exit_price}")

    if trade.reason:
        st.markdown("**Reason:**")
        st.info(trade.reason)

    if trade.voice_note:
        audio_path = voice_note_path(trade.voice_note)
        if audio_path is not None and audio_path.exists():
            st.audio(str(audio_path))
        else:
            st.caption("Voice note file is missing.")


def render_view_trades(store: TradeStore):
    """Render view trades tab."""
    col1, col2, col3 = st.columns(3)
    with col1:
        status = st.selectbox("Status", [ALL] + [s.value for s in TradeStatus], key="status_filter")
    with col2:
        pair = st.selectbox("Pair", [ALL] + store.get_currency_pairs(), key="pair_filter")
    with col3:
        trade_type = st.selectbox("Type", [ALL] + [t.value for t in TradeType], key="type_filter")

    trades = store.get_trades({'status': status, 'pair': pair, 'type': trade_type})

    if not trades:
        st.info("No trades match these filters.")
        return

    st.dataframe(trades_frame(trades), use_container_width=True, hide_index=True)

    labels = {
        t.id: f"{format_date(t.timestamp)} · {t.currency_pair} · {t.trade_type.value} · {t.status.value}"
        for t in trades
    }
    selected = st.selectbox("Trade details", list(labels), format_func=labels.get)
    trade = store.get_trade(selected)
    if trade is None:
        return

    render_trade_details(trade)

    confirm = st.checkbox("I understand this trade will be deleted permanently", key=f"confirm_{trade.id}")
    if st.button("🗑 Delete Trade", disabled=not confirm):
        store.delete_trade(trade.id)
        st.success("Trade deleted successfully!")
        st.rerun()


def main():
    """Main app function."""
    st.title(f"💱 {ui_config.page_title}")

    store, statistics, archive = initialize_system()

    tab1, tab2, tab3 = st.tabs(["📈 Dashboard", "➕ Add Trade", "📓 View Trades"])

    with tab1:
        render_dashboard(statistics)

    with tab2:
        render_add_trade(store, archive)

    with tab3:
        render_view_trades(store)

    with st.sidebar:
        st.header("⚙️ Journal")
        st.caption(f"{len(store.get_currency_pairs())} currency pairs · "
                   f"showing {journal_config.recent_trades_limit} recent trades")
        if st.button("Export to CSV"):
            output = store.export_to_csv()
            st.success(f"Exported to {output}")


if __name__ == "__main__":
    main()
