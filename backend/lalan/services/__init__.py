"""Booking lifecycle services."""
