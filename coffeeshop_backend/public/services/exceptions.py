# public/services/exceptions.py

"""
GATEWAY ERRORS

Every failure leaving the gateway is one of these. The dispatcher turns
them into the uniform error envelope; `code`, `http_status` and
`retryable` travel with the class.
"""


class GatewayError(Exception):
    """Base exception for all gateway failures."""

    code = "gateway_error"
    http_status = 400
    retryable = False

    def __init__(self, message: str = "", *, details=None):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or (self.__class__.__doc__ or self.code).strip()
        self.details = details


class UnknownActionError(GatewayError):
    """Unknown action."""

    code = "unknown_action"


class MalformedRequestError(GatewayError):
    """Request body is not a JSON object."""

    code = "malformed_request"


class PayloadValidationError(GatewayError):
    """Payload failed validation."""

    code = "validation_error"


class NotFoundError(GatewayError):
    """No record with that id."""

    code = "not_found"
    http_status = 404


class ConflictError(GatewayError):
    """Request conflicts with the current record state."""

    code = "conflict"
    http_status = 409


class ServerBusyError(GatewayError):
    """Server busy, please retry."""

    code = "busy"
    http_status = 503
    retryable = True


class AssetError(GatewayError):
    """Asset could not be stored."""

    code = "asset_error"
