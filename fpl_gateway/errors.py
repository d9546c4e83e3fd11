from typing import Optional


class ProxyError(Exception):
    """A failure the proxy reports to its caller as an ``{"error": ...}`` envelope."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_envelope(self) -> dict:
        return {"error": self.message}


class UpstreamShapeError(ProxyError):
    """Upstream answered 2xx but the body does not look like the resource."""

    def __init__(self, resource_name: str):
        super().__init__(502, f"Unexpected response shape for {resource_name}")


class FPLServiceError(Exception):
    """Raised by the client data-access service; the message is user-facing."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
