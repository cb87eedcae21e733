"""Booking, package, notification and PDF services."""
