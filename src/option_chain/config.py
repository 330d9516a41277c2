# Project configuration and constants
import os


def _env(name, default, cast=str):
    value = os.getenv(f"OPTION_CHAIN_{name}")
    if value is None or value == '':
        return default
    return cast(value)


# Underlying index and strike window around ATM
SYMBOL = _env('SYMBOL', 'NIFTY')
STRIKE_WINDOW = _env('STRIKE_WINDOW', 10, int)

# Polling and retry policy (retries only on read timeout)
POLL_INTERVAL_SEC = _env('POLL_INTERVAL_SEC', 120, float)
MAX_RETRIES = _env('MAX_RETRIES', 3, int)
RETRY_DELAY_SEC = _env('RETRY_DELAY_SEC', 2, float)
CONNECT_TIMEOUT_SEC = _env('CONNECT_TIMEOUT_SEC', 10, float)
READ_TIMEOUT_SEC = _env('READ_TIMEOUT_SEC', 20, float)

# Output files (empty string disables the sink)
CSV_PATH = _env('CSV_PATH', '')
EXCEL_PATH = _env('EXCEL_PATH', '')

LOG_LEVEL = _env('LOG_LEVEL', 'INFO')

NSE_BASE_URL = 'https://www.nseindia.com'
NSE_OPTION_CHAIN_URL = NSE_BASE_URL + '/api/option-chain-indices'
NSE_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Accept': 'application/json, text/plain, */*',
    'Accept-Language': 'en-US,en;q=0.9',
    'Referer': 'https://www.nseindia.com/option-chain',
}

# IV thresholds (percent) that widen or narrow the target band
HIGH_IV = 25
LOW_IV = 15

# Price band multipliers applied to LTP
ENTRY_BAND = (0.995, 1.005)
CALL_STOP_BAND = (0.97, 0.98)
CALL_TARGET_BAND = (1.05, 1.10)
CALL_TARGET_BAND_HIGH_IV = (1.10, 1.15)
CALL_TARGET_BAND_LOW_IV = (1.03, 1.05)
PUT_STOP_BAND = (1.02, 1.03)
# min > max for the default put target is kept as-is
PUT_TARGET_BAND = (0.95, 0.90)
PUT_TARGET_BAND_HIGH_IV = (0.90, 0.85)
PUT_TARGET_BAND_LOW_IV = (0.98, 0.95)

# Columns shown in the console table and written to CSV/Excel
TABLE_COLUMNS = [
    'CE OI', 'CE Change OI', 'CE Volume', 'Strike Price',
    'PE OI', 'PE Change OI', 'PE Volume'
]
CSV_COLUMNS = ['Time'] + TABLE_COLUMNS
