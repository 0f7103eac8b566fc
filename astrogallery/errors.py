"""Errors the gallery commands report to the user."""


class GalleryError(Exception):
    """Base class; ``hint`` is a one-line next step for the operator."""

    def __init__(self, message: str, hint: str = ""):
        super().__init__(message)
        self.hint = hint


class SetupError(GalleryError):
    """A required image directory is missing."""


class EmptyInputError(GalleryError):
    """There are no images to work from."""


class FetchError(GalleryError):
    """The catalog could not be downloaded."""


class CatalogFormatError(GalleryError):
    """The catalog is not a JSON object with an images list."""
