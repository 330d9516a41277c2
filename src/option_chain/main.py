import argparse
import logging
import time
from dataclasses import dataclass
from datetime import datetime

from option_chain import config
from option_chain.loader import NSEClient, fetch_with_retries, load_snapshot_file
from option_chain.logging_config import configure_logging
from option_chain.models import PollState
from option_chain.recommender import format_recommendation, recommend_trade
from option_chain.report import print_chain_table
from option_chain.storage import save_excel, save_or_update_csv
from option_chain.strategy import resolve_expiry, select_strikes

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    symbol: str = config.SYMBOL
    window: int = config.STRIKE_WINDOW
    interval: float = config.POLL_INTERVAL_SEC
    max_retries: int = config.MAX_RETRIES
    retry_delay: float = config.RETRY_DELAY_SEC
    csv_path: str = config.CSV_PATH
    excel_path: str = config.EXCEL_PATH
    color: bool = True


def _save(kind, writer, path, *args):
    # write failures are logged, scoring still runs
    try:
        writer(path, *args)
    except Exception:
        logger.exception("Could not write %s file %s", kind, path)


def run_cycle(state, settings, fetch, clock=datetime.now, sleep=time.sleep):
    """
    One fetch -> filter -> present -> score pass.
    Returns the recommendation, or None when there was nothing to score.
    """
    now = clock()
    state.cycles += 1
    logger.info("================== %s ====================", now)

    snapshot = fetch_with_retries(fetch, settings.symbol, max_retries=settings.max_retries,
                                  delay=settings.retry_delay, sleep=sleep)
    if snapshot is None:
        logger.info("No data this cycle")
        return None

    expiry_date = resolve_expiry(state, snapshot)
    logger.info("Using expiry date: %s", expiry_date)

    filtered = select_strikes(snapshot, expiry_date, window=settings.window)
    if not filtered:
        logger.info("Nothing to show for expiry %s", expiry_date)
        return None

    print_chain_table(filtered, color=settings.color)
    if settings.csv_path:
        _save("CSV", save_or_update_csv, settings.csv_path, filtered, now)
    if settings.excel_path:
        _save("Excel", save_excel, settings.excel_path, filtered)

    rec = recommend_trade(filtered)
    state.last_recommendation = rec
    print(format_recommendation(rec))
    return rec


def poll(settings, fetch, sleep=time.sleep, clock=datetime.now, max_cycles=None, state=None):
    """
    Run cycles every ``settings.interval`` seconds until ``max_cycles`` is
    reached or the process is interrupted. A failing cycle is logged and
    polling carries on.
    """
    state = state or PollState()
    while max_cycles is None or state.cycles < max_cycles:
        try:
            run_cycle(state, settings, fetch, clock=clock, sleep=sleep)
        except Exception:
            logger.exception("Cycle %d failed", state.cycles)
        if max_cycles is not None and state.cycles >= max_cycles:
            break
        sleep(settings.interval)
    return state


def _window(value):
    window = int(value)
    if window < 0:
        raise argparse.ArgumentTypeError(f"window must be >= 0, got {value}")
    return window


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Poll the NSE option chain around ATM and suggest a trade.")
    parser.add_argument('--symbol', default=config.SYMBOL, help="index symbol (default: %(default)s)")
    parser.add_argument('--window', type=_window, default=config.STRIKE_WINDOW, help="strikes either side of ATM")
    parser.add_argument('--interval', type=float, default=config.POLL_INTERVAL_SEC, help="seconds between polls")
    parser.add_argument('--retries', type=int, default=config.MAX_RETRIES, help="retries on read timeout")
    parser.add_argument('--csv', default=config.CSV_PATH, help="CSV file to upsert strikes into")
    parser.add_argument('--excel', default=config.EXCEL_PATH, help="xlsx file to overwrite each cycle")
    parser.add_argument('--from-file', help="replay a saved NSE JSON response instead of fetching")
    parser.add_argument('--once', action='store_true', help="run a single cycle and exit")
    parser.add_argument('--no-color', action='store_true', help="disable support/resistance colours")
    parser.add_argument('--log-level', default=config.LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)

    settings = Settings(
        symbol=args.symbol,
        window=args.window,
        interval=args.interval,
        max_retries=args.retries,
        csv_path=args.csv,
        excel_path=args.excel,
        color=not args.no_color,
    )
    if args.from_file:
        snapshot = load_snapshot_file(args.from_file)
        fetch = lambda _symbol: snapshot
        max_cycles = 1
    else:
        fetch = NSEClient().fetch_snapshot
        max_cycles = 1 if args.once else None

    try:
        poll(settings, fetch, max_cycles=max_cycles)
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
