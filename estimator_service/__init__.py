"""Package marker for the CTC estimator HTTP service."""

__version__ = "0.1.0"
