"""rep-scorer: per-rep workout scoring, aggregation and rewards."""

__version__ = "0.1.0"
