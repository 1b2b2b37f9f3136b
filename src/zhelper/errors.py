from __future__ import annotations


class AppError(Exception):
    """Base error for expected failures."""

    def __init__(self, message: str, *, http_status: int = 400):
        super().__init__(message)
        self.message = message
        self.http_status = http_status


class AuthError(AppError):
    def __init__(self, message: str = "unauthorized"):
        super().__init__(message, http_status=401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "access denied"):
        super().__init__(message, http_status=403)


class NotFoundError(AppError):
    def __init__(self, message: str = "not found"):
        super().__init__(message, http_status=404)


class ConflictError(AppError):
    def __init__(self, message: str = "conflict"):
        super().__init__(message, http_status=409)


class ValidationFailure(AppError):
    def __init__(self, message: str = "validation failed"):
        super().__init__(message, http_status=400)


class DataManagerError(AppError):
    """Failures raised by the procurement data manager itself."""

    COULD_NOT_LOAD_PROCUREMENT_NULL_DATA = "Could not load procurement: null data"
    NON_EXISTING_LOAD_OR_DELETE_EXCEPTION = "Procurement with id %s does not exist"


class NullInputError(DataManagerError):
    def __init__(self, message: str = DataManagerError.COULD_NOT_LOAD_PROCUREMENT_NULL_DATA):
        super().__init__(message, http_status=400)


class NonExistingDeleteError(DataManagerError):
    def __init__(self, entity_id: int):
        super().__init__(self.NON_EXISTING_LOAD_OR_DELETE_EXCEPTION % entity_id, http_status=404)
        self.entity_id = entity_id
