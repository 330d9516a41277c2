from decimal import Decimal, ROUND_HALF_UP

from option_chain import config
from option_chain.models import Recommendation, Side


def round_price(value):
    # Half-up on the shortest repr, so 0.125 -> 0.13 rather than 0.12
    return float(Decimal(repr(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def _band(ltp, multipliers):
    low, high = multipliers
    return round_price(ltp * low), round_price(ltp * high)


def price_bands(side, ltp, iv):
    """
    Entry, stop-loss and target bands for a long position in ``side``.
    High IV widens the target, low IV narrows it.
    """
    entry = _band(ltp, config.ENTRY_BAND)
    if side is Side.CALL:
        stop_loss = _band(ltp, config.CALL_STOP_BAND)
        target = config.CALL_TARGET_BAND
        if iv > config.HIGH_IV:
            target = config.CALL_TARGET_BAND_HIGH_IV
        elif iv < config.LOW_IV:
            target = config.CALL_TARGET_BAND_LOW_IV
    else:
        stop_loss = _band(ltp, config.PUT_STOP_BAND)
        target = config.PUT_TARGET_BAND
        if iv > config.HIGH_IV:
            target = config.PUT_TARGET_BAND_HIGH_IV
        elif iv < config.LOW_IV:
            target = config.PUT_TARGET_BAND_LOW_IV
    return entry, stop_loss, _band(ltp, target)


def _complete(quote):
    return (
        quote is not None
        and quote.last_price is not None
        and quote.open_interest is not None
        and quote.implied_volatility is not None
    )


def recommend_trade(filtered):
    """
    Pick the single call or put with the highest OI x IV score.
    Spot above strike only scores the call leg, spot below strike only the
    put leg. Records missing either leg are skipped. Returns None when no
    record qualifies.
    """
    best = None
    best_score = float('-inf')

    for record in filtered:
        call, put = record.call, record.put
        if not (_complete(call) and _complete(put)):
            continue

        current_price = call.underlying_value
        if current_price is None:
            continue

        if current_price > record.strike_price:
            side, leg = Side.CALL, call
        elif current_price < record.strike_price:
            side, leg = Side.PUT, put
        else:
            continue

        score = leg.open_interest * leg.implied_volatility
        if score > best_score:
            best_score = score
            entry, stop_loss, target = price_bands(side, leg.last_price, leg.implied_volatility)
            best = Recommendation(
                side=side,
                strike_price=record.strike_price,
                entry_range=entry,
                stop_loss_range=stop_loss,
                target_range=target,
                score=score,
            )

    return best


def _fmt_range(band):
    return f"{band[0]}-{band[1]}"


def format_recommendation(rec):
    if rec is None:
        return "No profitable option found based on OI and IV."
    lines = [
        "Most Profitable Option:",
        f"{rec.side.value} - Strike Price: {rec.strike_price}",
        f"BUY Range: {_fmt_range(rec.entry_range)}",
        f"Stop Loss Range: {_fmt_range(rec.stop_loss_range)}",
        f"Target Range: {_fmt_range(rec.target_range)}",
        f"Score (OI x IV): {rec.score}",
    ]
    return "\n".join(lines)
