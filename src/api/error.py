from typing import Dict, Type

from fastapi import status

from src.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


class ValidationError(ClientError):
    def __init__(self, base_error: Error):
        super().__init__(base_error, status.HTTP_400_BAD_REQUEST)


class UnauthorizedError(ClientError):
    def __init__(self, base_error: Error):
        super().__init__(base_error, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(ClientError):
    def __init__(self, base_error: Error):
        super().__init__(base_error, status.HTTP_403_FORBIDDEN)


class NotFoundError(ClientError):
    def __init__(self, base_error: Error):
        super().__init__(base_error, status.HTTP_404_NOT_FOUND)


class ConflictError(ClientError):
    def __init__(self, base_error: Error):
        super().__init__(base_error, status.HTTP_409_CONFLICT)


ERROR_CLASSES: Dict[str, Type[ClientError]] = {
    "VALIDATION_ERROR": ValidationError,
    "INVALID_MANIFEST": ValidationError,
    "INVALID_PRODUCT_TYPE": ValidationError,
    "INVALID_PRODUCT": ValidationError,
    "INVALID_USER": ValidationError,
    "ORDER_REJECTED": ValidationError,
    "PAYMENT_REJECTED": ValidationError,
    "PAYMENT_GATEWAY_INACTIVE": ValidationError,
    "PLUGIN_CONFIG_INCOMPLETE": ValidationError,
    "PLUGIN_DEPENDENCY_UNMET": ValidationError,
    "PLUGIN_DEPRECATED": ValidationError,
    "TENANT_INACTIVE": ValidationError,
    "INVALID_CREDENTIALS": UnauthorizedError,
    "UNAUTHORIZED": UnauthorizedError,
    "INVALID_TOKEN": UnauthorizedError,
    "INVALID_API_KEY": UnauthorizedError,
    "FORBIDDEN": ForbiddenError,
    "TENANT_MISMATCH": ForbiddenError,
    "PLUGIN_NOT_INSTALLED": NotFoundError,
    "PLUGIN_ALREADY_INSTALLED": ConflictError,
}


def to_exception(error: Error) -> Exception:
    """Map an application error code to the HTTP exception raised for it"""
    error_class = ERROR_CLASSES.get(error.code)
    if error_class is None:
        if error.code.endswith("_NOT_FOUND"):
            error_class = NotFoundError
        elif error.code.endswith(("_EXISTS", "_IN_USE")):
            error_class = ConflictError
    if error_class is None:
        return ServerError(error)
    return error_class(error)


def raise_for_error(error: Error):
    raise to_exception(error)
