"""
Glucose Log - Personal blood-glucose tracking.

Records blood-sugar measurements in a local key-value store, filters them
by time window, summarizes them, and exports a printable PDF report.
"""

__version__ = "0.1.0"
