"""Shared helpers for tablecheck."""
