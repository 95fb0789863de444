"""Error taxonomy shared by services and request handlers."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for failures reported to HTTP clients."""

    message: str

    code: ClassVar[str] = "service_error"
    status_code: ClassVar[int] = 500

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class ConfigurationError(ServiceError):
    """A provider credential or model reference is not configured."""

    code = "configuration_error"
    status_code = 500


class ValidationError(ServiceError):
    """Inbound request is missing, malformed or oversized."""

    code = "validation_error"
    status_code = 400


class UpstreamEmptyResponseError(ServiceError):
    """Provider call succeeded but carried no usable payload."""

    code = "empty_response"
    status_code = 500


class UpstreamQuotaError(ServiceError):
    """Provider reported a rate or quota limit."""

    code = "quota_exceeded"
    status_code = 429


class UpstreamModelError(ServiceError):
    """Provider rejected the model reference as invalid or inaccessible."""

    code = "invalid_model"
    status_code = 422


class UnknownUpstreamError(ServiceError):
    """Any other provider failure."""

    code = "upstream_error"
    status_code = 500
