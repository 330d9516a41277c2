import streamlit as st

from option_chain import config
from option_chain.analyzer import support_resistance
from option_chain.loader import NSEClient, fetch_with_retries
from option_chain.models import PollState
from option_chain.recommender import recommend_trade
from option_chain.report import chain_frame
from option_chain.strategy import atm_strike, resolve_expiry, select_strikes

st.set_page_config(page_title="Live Option Chain (NSE)", layout="wide")
st.markdown("""
    <style>
    .main {background-color: #f8fafc;}
    .stDataFrame {background-color: #fff; border-radius: 10px;}
    .stButton>button {background-color: #2563eb; color: white; border-radius: 6px; font-weight: 600; font-size: 0.95em; padding: 0.25em 1em; margin: 0.1em; min-width: 90px; min-height: 32px;}
    .section-card {background: linear-gradient(90deg,#60a5fa,#a7f3d0); color:#222; border-radius:12px; padding:1.2em; margin-bottom:1.2em; font-size:1.15em; box-shadow: 0 2px 8px #0001;}
    .top-table {background: #e0e7ff; border-radius: 12px; padding: 1em; margin-bottom: 1.2em; box-shadow: 0 2px 8px #0001;}
    </style>
""", unsafe_allow_html=True)

st.title("📈 Live Option Chain")

symbol = st.text_input("Enter NSE index symbol (e.g., NIFTY, BANKNIFTY):", value=config.SYMBOL)
window = st.number_input("Strikes either side of ATM", min_value=1, max_value=50, value=config.STRIKE_WINDOW, step=1)

# --- Auto-refresh controls ---
if 'autorefresh_on' not in st.session_state:
    st.session_state['autorefresh_on'] = False
if 'poll_state' not in st.session_state:
    st.session_state['poll_state'] = PollState()
if 'client' not in st.session_state:
    st.session_state['client'] = NSEClient()

refresh_interval = st.number_input("⏱️ Auto-refresh interval (seconds, 0 = off)", min_value=0, max_value=600,
                                   value=int(config.POLL_INTERVAL_SEC), step=1, key='refresh_interval')
start, stop, fetch = st.columns([1, 1, 1])
with start:
    if st.button("▶️ Start", key='start_btn'):
        st.session_state['autorefresh_on'] = True
with stop:
    if st.button("⏹️ Stop", key='stop_btn'):
        st.session_state['autorefresh_on'] = False
with fetch:
    fetch_clicked = st.button("🔄 Fetch", key='fetch_btn')

if refresh_interval > 0 and st.session_state['autorefresh_on']:
    from streamlit_autorefresh import st_autorefresh
    st_autorefresh(interval=refresh_interval * 1000, key="autorefresh")

if fetch_clicked or (refresh_interval > 0 and st.session_state['autorefresh_on']):
    state = st.session_state['poll_state']
    snapshot = fetch_with_retries(st.session_state['client'].fetch_snapshot, symbol.upper())
    if snapshot is None:
        st.error("Error fetching data from NSE. Check the logs and try again.")
        st.stop()

    expiry_date = resolve_expiry(state, snapshot)
    filtered = select_strikes(snapshot, expiry_date, window=int(window))
    if not filtered:
        st.warning(f"No strikes for expiry {expiry_date}.")
        st.stop()

    spot = snapshot.underlying_value
    atm = atm_strike(snapshot)
    support, resistance, sentiment = support_resistance(filtered, spot)
    st.markdown(
        f"<div class='section-card'><b>Spot Price:</b> {spot} &nbsp; <b>ATM:</b> {atm} &nbsp; "
        f"<b>Expiry:</b> {expiry_date}<br><b>Support:</b> {support} &nbsp; <b>Resistance:</b> {resistance} "
        f"&nbsp; <b>Sentiment:</b> {sentiment}</div>",
        unsafe_allow_html=True,
    )

    st.markdown("<div class='top-table'>", unsafe_allow_html=True)
    st.subheader("Option Chain around ATM")
    st.dataframe(chain_frame(filtered), use_container_width=True)
    st.markdown("</div>", unsafe_allow_html=True)

    # --- SUMMARY CARD ---
    rec = recommend_trade(filtered)
    if rec is None:
        st.info("No profitable option found based on OI and IV.")
    else:
        summary_html = "<div class='section-card'><b>Summary:</b><br>"
        summary_html += f"<b>Which Strike to Buy:</b> {rec.strike_price} ({rec.side.value})<br>"
        summary_html += f"<b>Entry:</b> {rec.entry_range[0]}-{rec.entry_range[1]} &nbsp; "
        summary_html += f"<b>Stop Loss:</b> {rec.stop_loss_range[0]}-{rec.stop_loss_range[1]} &nbsp; "
        summary_html += f"<b>Target:</b> {rec.target_range[0]}-{rec.target_range[1]}<br>"
        summary_html += f"<b>Score (OI x IV):</b> {rec.score}"
        summary_html += "</div>"
        st.markdown(summary_html, unsafe_allow_html=True)
