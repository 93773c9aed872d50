"""HTTP API for the Hoarder service."""
