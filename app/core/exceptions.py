"""
Domain exceptions for the image ingestion layer.

`app.core.storage_utils` is framework-free, so it raises these instead of
HTTPException. Each carries the HTTP status code it is rendered with by the
handler registered in `app.main`.
"""

from fastapi import status


class ImageProcessingException(Exception):
    """Base class for upload / transcode / storage errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidImageTypeException(ImageProcessingException):
    """
    Uploaded file's content type is not in the raster allow-list.

    HTTP Status Code: 400 Bad Request
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, content_type: str | None):
        self.content_type = content_type
        super().__init__(
            f"Invalid image type '{content_type}'. Allowed: PNG, JPEG."
        )


class ImageTooLargeException(ImageProcessingException):
    """
    Uploaded file exceeds the per-file byte cap.

    HTTP Status Code: 413 Request Entity Too Large
    """

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Image too large ({size} bytes, max {limit}).")


class TooManyImagesException(ImageProcessingException):
    """
    Gallery upload carries more files than a product may hold.

    HTTP Status Code: 400 Bad Request
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(f"Too many gallery images: {count} (max {limit}).")


class ImageEncodingException(ImageProcessingException):
    """
    Blob could not be decoded or re-encoded.

    HTTP Status Code: 422 Unprocessable Entity
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not process image: {reason}")


class StorageWriteException(ImageProcessingException):
    """
    Transcoded file could not be written to the upload directory.

    HTTP Status Code: 500 Internal Server Error
    """

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        super().__init__(f"Failed to store image '{filename}': {reason}")


class StorageDeleteException(ImageProcessingException):
    """
    A superseded file could not be removed.

    Never reaches the client: callers log it and carry on.
    """

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        super().__init__(f"Failed to delete image '{filename}': {reason}")
