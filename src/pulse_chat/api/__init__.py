"""HTTP API for Pulse Chat."""
