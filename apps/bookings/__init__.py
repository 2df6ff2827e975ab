"""Booking admission and lifecycle."""
