"""Scoring configuration loading."""
