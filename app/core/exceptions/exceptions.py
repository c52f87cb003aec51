from typing import Optional


class AppError(Exception):
    """Base class for all application-level errors."""
    pass


class DomainError(AppError):
    """Base for domain logic errors."""
    pass

class InvalidCursorError(DomainError):
    def __init__(self, detail: str):
        self.message = f"Invalid page cursor: {detail}"
        super().__init__(self.message)

class InvalidSearchQueryError(DomainError):
    def __init__(self, max_length: int):
        self.message = f"Search query must be at most {max_length} characters."
        super().__init__(self.message)



class InfrastructureError(AppError):
    """Base for infrastructure-related errors (upstream API, network)."""
    pass

class UpstreamError(InfrastructureError):
    def __init__(self, service: str, detail: str = "", status_code: Optional[int] = None):
        self.service = service
        self.status_code = status_code
        self.message = f"Error with upstream service '{service}': {detail}"
        super().__init__(self.message)
