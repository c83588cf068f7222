"""Core module for configuration, exceptions, logging and tracing.

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Custom namespaced exceptions
- One-time structlog / OpenTelemetry configuration
"""
