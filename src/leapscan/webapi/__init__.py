"""HTTP API for leapscan."""
