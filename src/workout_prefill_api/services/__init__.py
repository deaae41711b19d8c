"""Prefill, resolution, persistence and session services."""
