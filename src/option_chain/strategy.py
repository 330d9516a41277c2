import logging

logger = logging.getLogger(__name__)


def find_atm_strike(strikes, spot):
    """
    Nearest listed strike to spot. ``strikes`` must be sorted ascending;
    on an exact tie the smaller strike wins.
    """
    if not strikes or spot is None:
        return None
    return min(strikes, key=lambda strike: abs(strike - spot))


def strike_ladder(snapshot):
    """Distinct strikes across every expiry, ascending."""
    return sorted({record.strike_price for record in snapshot.records})


def atm_strike(snapshot):
    if snapshot is None or not snapshot.records:
        return None
    return find_atm_strike(strike_ladder(snapshot), snapshot.underlying_value)


def select_strikes(snapshot, expiry_date, window=10):
    """
    Records for ``expiry_date`` whose strike lies within ``window`` listed
    strikes of ATM, in snapshot order.
    The strike ladder is built from every expiry so the ATM neighbourhood
    does not depend on which expiry is selected.
    """
    if window < 0:
        raise ValueError(f"window must be >= 0, got {window}")
    if snapshot is None or not snapshot.records or snapshot.underlying_value is None:
        return []

    spot = snapshot.underlying_value
    all_strikes = strike_ladder(snapshot)
    atm = atm_strike(snapshot)
    logger.info("Spot Price: %s, ATM Strike Price: %s", spot, atm)

    pos = all_strikes.index(atm)
    start = max(pos - window, 0)
    end = min(pos + window, len(all_strikes) - 1)
    selected = set(all_strikes[start:end + 1])

    return [
        record for record in snapshot.records
        if record.expiry_date == expiry_date and record.strike_price in selected
    ]


def resolve_expiry(state, snapshot):
    """
    Keep the cached expiry while the exchange still lists it, otherwise
    switch to the first listed expiry.
    """
    if snapshot is None or not snapshot.expiry_dates:
        return state.expiry_date
    if state.expiry_date not in snapshot.expiry_dates:
        if state.expiry_date is not None:
            logger.info("Expiry %s no longer listed, rolling over", state.expiry_date)
        state.expiry_date = snapshot.expiry_dates[0]
    return state.expiry_date
