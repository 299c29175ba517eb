"""HTTP API package for sqlseries."""
