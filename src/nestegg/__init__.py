"""nestegg - Monte Carlo projection of a monthly-funded investment portfolio."""

__version__ = "0.1.0"
