"""HTTP API for the back-office screens."""
