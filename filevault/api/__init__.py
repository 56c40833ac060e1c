"""HTTP API for FileVault."""
