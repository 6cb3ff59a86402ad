"""Scoring engine: catalog, averaging, aggregation, feedback and rewards."""
