"""Error taxonomy shared by the VaR engine, price sources and API layer."""


class VarServiceError(Exception):
    """Base class for all service errors."""


class InvalidParameter(VarServiceError, ValueError):
    """Raised for bad numeric inputs (empty returns, confidence outside (0, 1))."""


class InvalidMethod(VarServiceError, ValueError):
    """Raised when a VaR method selector is not one of the supported methods."""


class ConfigurationError(VarServiceError):
    """Raised when required configuration (e.g. an API key) is missing."""


class ProviderError(VarServiceError, RuntimeError):
    """Raised when a market-data provider request fails."""


class UpstreamError(ProviderError):
    """Raised when a provider reports an error, or every provider has failed."""


class DecodeError(ProviderError):
    """Raised when a provider payload cannot be decoded."""
