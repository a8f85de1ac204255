"""
Error family raised by the services and translated into HTTP responses
in one place (see ``storefront.main``).

Every error carries a human readable ``message``; ``kind`` and
``status_code`` are fixed per class, so the boundary matches on the type
instead of inspecting names or strings.
"""


class StoreError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message, "error": self.kind}


class InvalidInputError(StoreError):
    kind = "invalid_input"
    status_code = 400


class NotFoundError(StoreError):
    kind = "not_found"
    status_code = 404


class ConflictError(StoreError):
    # the storefront client expects 400 for stock and duplicate failures
    kind = "conflict"
    status_code = 400


class InsufficientStockError(ConflictError):
    kind = "insufficient_stock"


class AlreadyExistsError(ConflictError):
    kind = "already_exists"


class UnauthorizedError(StoreError):
    kind = "unauthorized"
    status_code = 401


class InfrastructureError(StoreError):
    kind = "infrastructure"
    status_code = 500

    def to_dict(self) -> dict:
        # never leak driver messages to the client
        return {"message": "Internal server error", "error": self.kind}
