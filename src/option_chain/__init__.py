"""NSE option chain poller: ATM strike window, support/resistance table and OI x IV trade suggestion."""

__version__ = "0.1.0"
