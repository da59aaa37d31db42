"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LLMGatewayError(DomainException):
    """LLM gateway returned an error, is unavailable, or is not configured"""

    pass


class RateLimitError(LLMGatewayError):
    """LLM gateway rejected the request with HTTP 429"""

    pass


class PaymentRequiredError(LLMGatewayError):
    """LLM gateway account is out of credits (HTTP 402)"""

    pass


class InvalidForecastResponseError(DomainException):
    """LLM response did not contain a usable structured forecast"""

    pass
