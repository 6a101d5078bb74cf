"""Shared domain helpers (distributions, weight initialization)."""
