"""Portfolio Export - static-site export pipeline for portfolio documents."""

__version__ = "0.3.0"
