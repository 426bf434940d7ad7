"""Error taxonomy shared by the stores and the HTTP layer.

Every subclass carries the status code and the client-facing message; the
handler registered in ``docchat.main`` renders them as ``{"detail": ...}``.
"""
from fastapi import status


class DocChatError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(DocChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class Conflict(DocChatError):
    status_code = status.HTTP_409_CONFLICT
    detail = "User already exists"


class Unauthorized(DocChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"


class InvalidCredentials(Unauthorized):
    detail = "Invalid credentials"


class NotFound(DocChatError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "File not found"


class BlobNotFound(NotFound):
    pass


class UnsupportedMediaType(DocChatError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    detail = "File type not allowed"


class PayloadTooLarge(DocChatError):
    status_code = 413
    detail = "File too large"


class UpstreamError(DocChatError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Upstream service failed"
