class TexCorrectError(Exception):
    """Base exception for all texcorrect errors."""
    pass


class DocumentIOError(TexCorrectError):
    """Raised when the input document cannot be read or the output cannot be written."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class OracleSessionError(TexCorrectError):
    """Raised when the correction service session cannot be started or driven."""
    pass


class ConfigurationError(TexCorrectError):
    """Raised when settings or the YAML overlay are invalid."""
    pass


class AssemblyError(TexCorrectError):
    """Raised when a chunk reaches the assembler without a correction."""
    pass
