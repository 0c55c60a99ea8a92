"""Upstream clients and the weather use case."""
