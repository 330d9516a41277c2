def analyze_oi_behavior(change_oi, ltp, avg_ltp):
    """
    Determines OI behavior: Long Build-up, Short Covering, etc.
    """
    if change_oi is None or ltp is None or avg_ltp is None:
        return 'Neutral'
    if change_oi > 0 and ltp > avg_ltp:
        return 'Long Build-up'
    elif change_oi < 0 and ltp > avg_ltp:
        return 'Short Covering'
    elif change_oi > 0 and ltp < avg_ltp:
        return 'Short Build-up'
    elif change_oi < 0 and ltp < avg_ltp:
        return 'Long Unwinding'
    else:
        return 'Neutral'


def analyze_volume_strength(volume, avg_volume):
    if volume is None or not avg_volume:
        return 'Normal'
    if volume > avg_volume * 1.2:
        return 'Strong'
    elif volume < avg_volume * 0.8:
        return 'Weak'
    else:
        return 'Normal'


def _max_oi_strike(filtered, leg_name):
    best_strike, best_oi = None, None
    for record in filtered:
        leg = getattr(record, leg_name)
        if leg is None or leg.open_interest is None:
            continue
        if best_oi is None or leg.open_interest > best_oi:
            best_strike, best_oi = record.strike_price, leg.open_interest
    return best_strike


def support_resistance(filtered, spot):
    """
    Support is the strike with the highest put OI, resistance the one with
    the highest call OI. Returns (support, resistance, sentiment).
    """
    support = _max_oi_strike(filtered, 'put')
    resistance = _max_oi_strike(filtered, 'call')
    if spot is None:
        sentiment = 'N/A'
    elif support is not None and spot < support:
        sentiment = 'Bearish'
    elif resistance is not None and spot > resistance:
        sentiment = 'Bullish'
    else:
        sentiment = 'Neutral'
    return support, resistance, sentiment
