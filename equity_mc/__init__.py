"""Equity Monte Carlo Harvester

Samples the terminal equity of a fixed-fraction trading curve recomputed by an
external formula engine and reduces the samples to distribution statistics.
Uses NumPy for the statistics and a plain key-value store for all I/O.
"""

__version__ = "0.1.0"
