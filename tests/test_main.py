import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from option_chain import main as driver
from option_chain.main import Settings, poll, run_cycle
from option_chain.models import ChainSnapshot, ContractQuote, PollState, Side

from conftest import EXPIRY, NEXT_EXPIRY


def _clock():
    return datetime(2024, 12, 20, 10, 0, 0)


def _bullish_snapshot(make_record, expiries=(EXPIRY,)):
    record = make_record(
        100.0,
        expiry=expiries[0],
        call=ContractQuote(last_price=50, open_interest=1000, change_in_open_interest=5,
                           total_traded_volume=10, implied_volatility=20, underlying_value=110),
        put=ContractQuote(last_price=40, open_interest=2000, implied_volatility=30),
    )
    return ChainSnapshot(underlying_value=110.0, expiry_dates=tuple(expiries), records=(record,))


def test_run_cycle_prints_table_and_recommendation(make_record, capsys):
    state = PollState()
    fetch = MagicMock(return_value=_bullish_snapshot(make_record))
    rec = run_cycle(state, Settings(color=False, csv_path='', excel_path=''), fetch, clock=_clock)

    assert rec.side is Side.CALL
    assert state.expiry_date == EXPIRY
    assert state.last_recommendation == rec
    out = capsys.readouterr().out
    assert "Nifty Option Chain (Filtered)" in out
    assert "Most Profitable Option:" in out


def test_run_cycle_no_data_is_noop(capsys):
    state = PollState()
    rec = run_cycle(state, Settings(), MagicMock(return_value=None), clock=_clock)
    assert rec is None
    assert state.expiry_date is None
    assert capsys.readouterr().out == ""


def test_run_cycle_retries_read_timeout(make_record):
    sleeps = []
    fetch = MagicMock(side_effect=[requests.exceptions.ReadTimeout(), _bullish_snapshot(make_record)])
    settings = Settings(color=False, csv_path='', excel_path='', retry_delay=2)
    rec = run_cycle(PollState(), settings, fetch, clock=_clock, sleep=sleeps.append)
    assert rec is not None
    assert sleeps == [2]


def test_run_cycle_writes_csv(tmp_path, make_record):
    path = tmp_path / "chain.csv"
    settings = Settings(color=False, csv_path=str(path), excel_path='')
    run_cycle(PollState(), settings, MagicMock(return_value=_bullish_snapshot(make_record)), clock=_clock)
    assert "10:00:00" in path.read_text()


def test_run_cycle_scores_when_writes_fail(tmp_path, make_record, capsys, caplog):
    # a directory cannot be opened as a CSV file
    settings = Settings(color=False, csv_path=str(tmp_path), excel_path=str(tmp_path / "chain.xlsx"))
    state = PollState()
    rec = run_cycle(state, settings, MagicMock(return_value=_bullish_snapshot(make_record)), clock=_clock)

    assert rec.side is Side.CALL
    assert state.last_recommendation == rec
    assert (tmp_path / "chain.xlsx").exists()
    assert "Could not write CSV file" in caplog.text
    assert "Most Profitable Option:" in capsys.readouterr().out


def test_poll_survives_failing_cycle(make_record):
    sleeps = []
    fetch = MagicMock(side_effect=[RuntimeError("boom"), _bullish_snapshot(make_record), None])
    state = poll(Settings(interval=120, color=False, csv_path='', excel_path=''), fetch,
                 sleep=sleeps.append, clock=_clock, max_cycles=3)
    assert state.cycles == 3
    assert fetch.call_count == 3
    assert state.last_recommendation.strike_price == 100.0
    # no sleep after the final cycle
    assert sleeps == [120, 120]


def test_poll_rolls_expiry_over(make_record):
    snaps = [
        _bullish_snapshot(make_record, expiries=(EXPIRY, NEXT_EXPIRY)),
        _bullish_snapshot(make_record, expiries=(EXPIRY, NEXT_EXPIRY)),
        _bullish_snapshot(make_record, expiries=(NEXT_EXPIRY,)),
    ]
    seen = []

    def fetch(symbol):
        snap = snaps.pop(0)
        seen.append(symbol)
        return snap

    state = poll(Settings(symbol="BANKNIFTY", color=False, csv_path='', excel_path=''), fetch,
                 sleep=lambda _: None, clock=_clock, max_cycles=3)
    assert state.expiry_date == NEXT_EXPIRY
    assert seen == ["BANKNIFTY"] * 3


def test_main_replays_saved_response(tmp_path, nse_payload, capsys, monkeypatch):
    monkeypatch.setattr(driver, "configure_logging", lambda level: None)
    path = tmp_path / "chain.json"
    path.write_text(json.dumps(nse_payload), encoding="utf-8")
    assert driver.main(["--from-file", str(path), "--no-color", "--window", "1", "--log-level", "WARNING"]) == 0
    out = capsys.readouterr().out
    assert "24000" in out
    assert "Most Profitable Option:" in out


def test_parse_args_rejects_negative_window(capsys):
    with pytest.raises(SystemExit):
        driver.parse_args(["--window", "-2"])
    assert "window must be >= 0" in capsys.readouterr().err
    assert driver.parse_args(["--window", "0"]).window == 0


def test_parse_args_defaults():
    args = driver.parse_args([])
    assert args.symbol == "NIFTY"
    assert args.window == 10
    assert args.interval == 120
    assert not args.once
