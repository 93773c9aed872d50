"""Hoarder inference and metrics service."""
