"""
Pytest configuration and shared fixtures for option_chain tests.

Usage:
    def test_x(make_record, make_snapshot): ...
"""
import sys
from pathlib import Path

import pytest


def pytest_configure():
    """
    Ensure `src/` is on sys.path for the src-layout package import (`option_chain`).
    This keeps tests runnable without requiring an editable install.
    """
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if src.exists():
        sys.path.insert(0, str(src))


EXPIRY = "26-Dec-2024"
NEXT_EXPIRY = "02-Jan-2025"


def _quote(last_price=10.0, oi=1000, change_oi=0, volume=100, iv=20.0, underlying=100.0):
    from option_chain.models import ContractQuote

    return ContractQuote(
        last_price=last_price,
        open_interest=oi,
        change_in_open_interest=change_oi,
        total_traded_volume=volume,
        implied_volatility=iv,
        underlying_value=underlying,
    )


def _record(strike, expiry=EXPIRY, call=None, put=None):
    from option_chain.models import StrikeRecord

    return StrikeRecord(strike_price=strike, expiry_date=expiry, call=call, put=put)


@pytest.fixture
def make_quote():
    return _quote


@pytest.fixture
def make_record():
    return _record


@pytest.fixture
def make_snapshot():
    from option_chain.models import ChainSnapshot

    def factory(spot, strikes, expiries=(EXPIRY,), records=None):
        if records is None:
            records = [
                _record(strike, expiry, call=_quote(underlying=spot), put=_quote(underlying=spot))
                for expiry in expiries
                for strike in strikes
            ]
        return ChainSnapshot(underlying_value=spot, expiry_dates=tuple(expiries), records=tuple(records))

    return factory


@pytest.fixture
def nse_payload():
    """Trimmed NSE /api/option-chain-indices response."""
    def leg(strike, expiry, ltp, oi, chg, vol, iv):
        return {
            "strikePrice": strike,
            "expiryDate": expiry,
            "underlying": "NIFTY",
            "openInterest": oi,
            "changeinOpenInterest": chg,
            "totalTradedVolume": vol,
            "impliedVolatility": iv,
            "lastPrice": ltp,
            "underlyingValue": 23951.7,
        }

    return {
        "records": {
            "expiryDates": [EXPIRY, NEXT_EXPIRY],
            "underlyingValue": 23951.7,
            "timestamp": "20-Dec-2024 15:30:00",
            "data": [
                {"strikePrice": 23900, "expiryDate": EXPIRY,
                 "CE": leg(23900, EXPIRY, 120.5, 50000, 1200, 90000, 14.2),
                 "PE": leg(23900, EXPIRY, 70.1, 65000, -300, 80000, 15.1)},
                {"strikePrice": 24000, "expiryDate": EXPIRY,
                 "CE": leg(24000, EXPIRY, 60.0, 90000, 5000, 120000, 13.5),
                 "PE": leg(24000, EXPIRY, 110.2, 40000, 700, 70000, 14.8)},
                {"strikePrice": 24000, "expiryDate": NEXT_EXPIRY,
                 "CE": leg(24000, NEXT_EXPIRY, 150.0, 10000, 0, 5000, 12.0)},
                {"strikePrice": 24100, "expiryDate": EXPIRY,
                 "PE": leg(24100, EXPIRY, 170.0, 8000, 10, 2000, 15.0)},
            ],
        },
        "filtered": {"data": []},
    }
