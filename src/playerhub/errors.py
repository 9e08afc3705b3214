class RegistryError(Exception):
    """Base exception for player registry errors."""


class InvalidArgument(RegistryError, ValueError):
    """Raised when a caller passes data that violates a precondition."""


class ConflictError(RegistryError):
    """Raised when a nickname is already taken by another player."""


class PersistenceError(RegistryError):
    """Raised when reading or writing the backing storage fails."""


class CodecError(PersistenceError):
    """Raised when stored content cannot be decoded into player records."""


class ConfigError(RegistryError):
    """Raised when the registry configuration is invalid."""
