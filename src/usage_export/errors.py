class ExportError(Exception):
    """
    base class for errors raised while exporting usage records.
    """


class ConfigurationError(ExportError):
    """
    raised when the configuration yields nothing to export.
    """


class TransportError(ExportError):
    """
    raised when the usage API cannot be read, whether because of
    a network failure, rejected credentials or rate limiting.
    """
