"""Core constants: cache key structure and outward-facing messages.

Messages here are the only text that crosses the HTTP boundary for
failures; internal detail stays in logs.
"""

# Cache key prefixes (used with :id:<identifier>)
CACHE_PREFIX_USER = "user"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Response envelope messages
MESSAGE_SUCCESS = "Success"
MESSAGE_NOT_FOUND = "Resource not found"
MESSAGE_EMAIL_EXISTS = "Email already exists"
MESSAGE_PERSISTENCE_FAILURE = "A storage error occurred; please retry later"
MESSAGE_INTERNAL_ERROR = "Internal server error"
MESSAGE_VALIDATION_FAILED = "Request validation failed"
