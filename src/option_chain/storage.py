import logging
import os
from datetime import datetime

import pandas as pd

from option_chain.config import CSV_COLUMNS, TABLE_COLUMNS

logger = logging.getLogger(__name__)


def _ensure_parent(path):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _leg(leg, attr):
    return getattr(leg, attr) if leg is not None else None


def _row(record):
    return {
        'CE OI': _leg(record.call, 'open_interest'),
        'CE Change OI': _leg(record.call, 'change_in_open_interest'),
        'CE Volume': _leg(record.call, 'total_traded_volume'),
        'Strike Price': record.strike_price,
        'PE OI': _leg(record.put, 'open_interest'),
        'PE Change OI': _leg(record.put, 'change_in_open_interest'),
        'PE Volume': _leg(record.put, 'total_traded_volume'),
    }


def table_frame(filtered):
    return pd.DataFrame([_row(r) for r in filtered], columns=TABLE_COLUMNS)


def save_or_update_csv(path, filtered, timestamp=None):
    """
    Upsert one row per strike price. Existing strikes keep their position
    and are overwritten; new strikes are appended.
    Returns the number of rows in the file.
    """
    timestamp = timestamp or datetime.now()
    new = table_frame(filtered)
    new.insert(0, 'Time', timestamp.strftime('%H:%M:%S'))

    _ensure_parent(path)
    if os.path.exists(path) and os.path.getsize(path) > 0:
        existing = pd.read_csv(path).reindex(columns=CSV_COLUMNS)
        merged = pd.concat([existing, new], ignore_index=True)
        # keep first position, last values
        order = merged.drop_duplicates('Strike Price', keep='first')['Strike Price']
        latest = merged.drop_duplicates('Strike Price', keep='last').set_index('Strike Price')
        merged = latest.loc[order].reset_index()[CSV_COLUMNS]
    else:
        merged = new[CSV_COLUMNS]

    merged.to_csv(path, index=False)
    logger.info("Data updated in %s (%d strikes)", path, len(merged))
    return len(merged)


def save_excel(path, filtered):
    """
    Write the filtered chain to an xlsx sheet, highlighting the max call OI
    cell in red and the max put OI cell in green.
    """
    df = table_frame(filtered)
    _ensure_parent(path)

    with pd.ExcelWriter(path, engine='xlsxwriter') as writer:
        df.to_excel(writer, sheet_name='Option Chain', index=False)
        workbook = writer.book
        worksheet = writer.sheets['Option Chain']
        highlights = (
            ('CE OI', workbook.add_format({'bg_color': 'red'})),
            ('PE OI', workbook.add_format({'bg_color': 'green'})),
        )
        for column, cell_format in highlights:
            values = pd.to_numeric(df[column], errors='coerce')
            if values.notna().any():
                row = int(values.idxmax())
                col = TABLE_COLUMNS.index(column)
                worksheet.write(row + 1, col, values[row].item(), cell_format)

    logger.info("Data saved to %s", path)
    return path
