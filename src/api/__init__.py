"""HTTP layer: FastAPI app, routes, wire schemas, and configuration."""
