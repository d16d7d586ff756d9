class APIError(Exception):
    """
    Base exception for all API-related errors.
    """
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class RecordNotFoundError(APIError):
    def __init__(self, message: str = "Record not found", status_code: int = 404):
        super().__init__(message, status_code)

class InvalidUpdateError(APIError):
    """
    Raised when a requested change cannot be applied to an order,
    e.g. a non-positive due time extension.
    """
    def __init__(self, message: str = "Invalid update.", status_code: int = 400):
        super().__init__(message, status_code)

class InvalidSettingError(APIError):
    def __init__(self, message: str = "Invalid setting.", status_code: int = 400):
        super().__init__(message, status_code)
