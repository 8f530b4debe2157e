"""
did:dns Driver Application Layer

This package implements the web application layer for the did:dns driver, serving
resolution over HTTP using the aiohttp framework in the shape expected of a
universal resolver driver.

Key Components:
- cli.py: Entry point for running the application
- server.py: Web server configuration, middleware and lifecycle
- config.py: Configuration management using Pydantic settings
- handlers/: Request handlers for resolution and health endpoints

The application uses two middleware layers:
- Statsd middleware for metrics collection
- Sentry middleware for error reporting

It provides the following endpoints:
- GET /1.0/identifiers/{identifier}: resolve a did:dns identifier
- GET /1.0/properties: driver configuration
- GET /internal/alive and /internal/ready: liveness and readiness probes
"""
