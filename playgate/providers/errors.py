"""Provider error types."""


class ProviderUnavailable(Exception):
    """An optional integration is not installed or cannot answer right now."""
