"""Trade behavior analytics.

Turns a trader's raw buy/sell records and equity-curve samples into
realized outcomes, entry-style labels, portfolio outcome distributions
and equity-curve risk statistics.  Everything here is a pure function
over caller-supplied collections.
"""

__version__ = "0.1.0"
