"""HTTP API for the aggregator."""
