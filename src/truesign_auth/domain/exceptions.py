class TruesignError(Exception):
    """Base class for everything raised by truesign_auth."""
    pass


class ConfigurationError(TruesignError):
    """Raised when the verification pipeline is built with an unusable config."""
    pass


class TokenDecryptionError(TruesignError):
    """Raised when a raw token cannot be turned into a DecryptedToken.

    Never leaves the decryptor: it is converted to ``None`` at that boundary.
    """
    pass
