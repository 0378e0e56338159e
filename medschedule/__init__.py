"""Appointment lifecycle and notification core for the medical scheduling app."""

__version__ = "0.1.0"
