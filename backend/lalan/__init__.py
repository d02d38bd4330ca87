"""Lalan rental marketplace backend."""
