"""Core: configuration, constants, logging, lifespan, registry and exception handlers."""
