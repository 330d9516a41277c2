import pandas as pd
from tabulate import tabulate

from option_chain.analyzer import analyze_oi_behavior, analyze_volume_strength
from option_chain.config import TABLE_COLUMNS

RESISTANCE_STYLES = ['red', 'yellow', 'magenta']
SUPPORT_STYLES = ['green', 'blue', 'cyan']

ANSI_CODES = {
    'red': '\033[31m',
    'green': '\033[32m',
    'yellow': '\033[33m',
    'blue': '\033[34m',
    'magenta': '\033[35m',
    'cyan': '\033[36m',
}
ANSI_RESET = '\033[0m'

CE_OI_COL = TABLE_COLUMNS.index('CE OI')
PE_OI_COL = TABLE_COLUMNS.index('PE OI')
STRIKE_COL = TABLE_COLUMNS.index('Strike Price')


def rank_style(kind, rank):
    """Style token for the rank-th highest call OI (resistance) or put OI (support)."""
    styles = RESISTANCE_STYLES if kind == 'resistance' else SUPPORT_STYLES if kind == 'support' else None
    if styles is None or rank is None or not 0 <= rank < len(styles):
        return None
    return styles[rank]


def top_ranks(values, n=3):
    """Map row index -> rank for the ``n`` largest values; missing values are not ranked."""
    present = [i for i, value in enumerate(values) if value is not None]
    order = sorted(present, key=lambda i: -values[i])
    return {index: rank for rank, index in enumerate(order[:n])}


def _leg_values(leg):
    if leg is None:
        return [None, None, None]
    return [leg.open_interest, leg.change_in_open_interest, leg.total_traded_volume]


def chain_rows(filtered):
    return [
        _leg_values(record.call) + [record.strike_price] + _leg_values(record.put)
        for record in filtered
    ]


def _paint(value, token):
    if token is None or value is None:
        return value
    return f"{ANSI_CODES[token]}{value}{ANSI_RESET}"


def format_chain_table(filtered, title="Nifty Option Chain (Filtered)", color=True):
    rows = chain_rows(filtered)
    if color:
        resistance = top_ranks([row[CE_OI_COL] for row in rows])
        support = top_ranks([row[PE_OI_COL] for row in rows])
        for index, row in enumerate(rows):
            row[CE_OI_COL] = _paint(row[CE_OI_COL], rank_style('resistance', resistance.get(index)))
            row[PE_OI_COL] = _paint(row[PE_OI_COL], rank_style('support', support.get(index)))

    colalign = ['right'] * len(TABLE_COLUMNS)
    colalign[STRIKE_COL] = 'center'
    table = tabulate(rows, headers=TABLE_COLUMNS, tablefmt='psql',
                     colalign=colalign, missingval='-')
    return f"{title}\n{table}"


def print_chain_table(filtered, color=True):
    print(format_chain_table(filtered, color=color))


LEG_FIELDS = {
    'LTP': 'last_price',
    'OI': 'open_interest',
    'Change OI': 'change_in_open_interest',
    'Volume': 'total_traded_volume',
    'IV': 'implied_volatility',
}
FRAME_FIELDS = list(LEG_FIELDS) + ['OI Behavior', 'Volume Strength']


def _leg_frame(filtered):
    rows = []
    for record in filtered:
        for label, leg in (('CE', record.call), ('PE', record.put)):
            if leg is None:
                continue
            row = {'Strike Price': record.strike_price, 'Type': label}
            row.update({column: getattr(leg, attr) for column, attr in LEG_FIELDS.items()})
            rows.append(row)
    return pd.DataFrame(rows, columns=['Strike Price', 'Type'] + list(LEG_FIELDS))


def chain_frame(filtered):
    """
    One row per strike with per-leg OI behaviour and volume strength,
    for the dashboard.
    """
    columns = [f"{label} {name}" for label in ('CE', 'PE') for name in FRAME_FIELDS]
    legs = _leg_frame(filtered)
    if legs.empty:
        wide = pd.DataFrame(columns=columns)
    else:
        legs[list(LEG_FIELDS)] = legs[list(LEG_FIELDS)].apply(pd.to_numeric)
        avg_ltp = legs.groupby('Type')['LTP'].mean()
        avg_volume = legs['Volume'].mean()
        legs['OI Behavior'] = legs.apply(
            lambda row: analyze_oi_behavior(row['Change OI'], row['LTP'], avg_ltp.get(row['Type'])), axis=1)
        legs['Volume Strength'] = legs['Volume'].apply(lambda v: analyze_volume_strength(v, avg_volume))
        wide = legs.set_index(['Strike Price', 'Type']).unstack('Type')
        wide.columns = [f"{label} {name}" for name, label in wide.columns]

    wide = wide.reindex(index=[record.strike_price for record in filtered], columns=columns)
    wide.index.name = 'Strike Price'
    return wide.reset_index()
