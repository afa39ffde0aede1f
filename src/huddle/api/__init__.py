"""HTTP layer: versioned routers and request middleware."""
