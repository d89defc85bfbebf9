class AppError(Exception):
    """Base application error"""


class ConfigError(AppError):
    """Missing or invalid configuration"""


class NotInitializedError(AppError):
    """Session manager used before initialize() completed"""


class SessionNotFoundError(AppError):
    """No session exists for the given user ID"""


class PersistenceError(AppError):
    """Failed to write the session store document"""


class GenerationError(AppError):
    """Generation backend call failed"""
