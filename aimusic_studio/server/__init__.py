"""
AI Music Studio Server Package.

This package contains the web server of the AI Music Studio service.
It includes the API definition, dependencies, middleware and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and constants.
    services: Request dependencies (auth, providers, services).
    middleware: Request logging and tracing.
    exception_handlers: Error to response mapping.
"""
