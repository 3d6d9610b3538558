class GAuthError(Exception):
    """Base class for every error raised by gauthgen."""


class InvalidSecret(GAuthError, ValueError):
    """The secret is not valid Base32."""


class InvalidErrorCorrectionLevel(GAuthError, ValueError):
    def __init__(self, token):
        self.token = token
        super().__init__(
            f"Invalid error correction level {token!r}. "
            "Choose one from [low, medium, quartile, high]."
        )


class FilesystemError(GAuthError, OSError):
    """The QR code file could not be created or written."""


class RenderError(GAuthError):
    """The QR renderer rejected the supplied parameters."""
