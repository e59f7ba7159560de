"""HTTP API for the combination engine."""
