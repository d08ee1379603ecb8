"""HTTP API for the back-office audit log."""
