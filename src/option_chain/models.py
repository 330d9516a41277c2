from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Side(Enum):
    CALL = 'CE'
    PUT = 'PE'


def _num(value, cast=float):
    if value is None or value == '' or value == '-':
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ContractQuote:
    last_price: Optional[float] = None
    open_interest: Optional[int] = None
    change_in_open_interest: Optional[int] = None
    total_traded_volume: Optional[int] = None
    implied_volatility: Optional[float] = None
    underlying_value: Optional[float] = None

    @classmethod
    def from_dict(cls, raw):
        """Build a quote from one NSE ``CE``/``PE`` leg; None if the leg is absent."""
        if not isinstance(raw, dict):
            return None
        return cls(
            last_price=_num(raw.get('lastPrice')),
            open_interest=_num(raw.get('openInterest'), int),
            change_in_open_interest=_num(raw.get('changeinOpenInterest'), int),
            total_traded_volume=_num(raw.get('totalTradedVolume'), int),
            implied_volatility=_num(raw.get('impliedVolatility')),
            underlying_value=_num(raw.get('underlyingValue')),
        )


@dataclass(frozen=True)
class StrikeRecord:
    strike_price: float
    expiry_date: str
    call: Optional[ContractQuote] = None
    put: Optional[ContractQuote] = None

    @classmethod
    def from_dict(cls, raw):
        if not isinstance(raw, dict):
            return None
        strike = _num(raw.get('strikePrice'))
        if strike is None:
            return None
        return cls(
            strike_price=strike,
            expiry_date=raw.get('expiryDate'),
            call=ContractQuote.from_dict(raw.get('CE')),
            put=ContractQuote.from_dict(raw.get('PE')),
        )


@dataclass(frozen=True)
class ChainSnapshot:
    underlying_value: Optional[float]
    expiry_dates: Tuple[str, ...] = ()
    records: Tuple[StrikeRecord, ...] = ()

    @classmethod
    def from_json(cls, payload):
        """
        Parse the NSE option-chain response.
        Only the ``records`` section is used; ``filtered`` is ignored.
        """
        if not isinstance(payload, dict):
            return None
        section = payload.get('records')
        if not isinstance(section, dict):
            return None
        records = []
        for raw in section.get('data') or []:
            record = StrikeRecord.from_dict(raw)
            if record is not None:
                records.append(record)
        return cls(
            underlying_value=_num(section.get('underlyingValue')),
            expiry_dates=tuple(section.get('expiryDates') or ()),
            records=tuple(records),
        )


@dataclass(frozen=True)
class Recommendation:
    side: Side
    strike_price: float
    entry_range: Tuple[float, float]
    stop_loss_range: Tuple[float, float]
    target_range: Tuple[float, float]
    score: float


@dataclass
class PollState:
    expiry_date: Optional[str] = None
    cycles: int = 0
    last_recommendation: Optional[Recommendation] = field(default=None, repr=False)
