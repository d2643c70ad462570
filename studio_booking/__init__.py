"""Booking and availability scheduling engine for a photography studio."""

__version__ = "0.1.0"
