"""Request-scoped dependencies of the HTTP API."""
