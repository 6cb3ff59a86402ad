"""Persistence boundary: record codec and JSONL workout store."""
