"""HTTP API layer: routes, error mapping and per-client admission control."""
