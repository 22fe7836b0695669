"""Infrastructure: persistence, cache and security implementations."""
