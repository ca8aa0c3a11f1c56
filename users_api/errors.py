class AppError(Exception):
    """Error forwarded to the central error responder."""

    def __init__(self, message: str = "", status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class AuthError(Exception):
    """Raised by the auth dependency; answered as a bare ``{"error": ...}``."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreError(Exception):
    pass


class StoreReadError(StoreError):
    pass


class StoreParseError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass
