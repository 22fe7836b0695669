"""HTTP layer: thin routes delegating to services resolved from the registry."""
