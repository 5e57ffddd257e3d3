"""Trace sources."""
