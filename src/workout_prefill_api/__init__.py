"""Workout prefill API: planned-workout parsing and strength-log prefill."""

__version__ = "0.1.0"
