"""Exceptions raised by the template library, scanner and exporter."""


class LexFormError(Exception):
    """Base class for LexForm errors."""


class TemplateNotFoundError(LexFormError):
    """Raised when a named template does not exist in the library."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template not found: {name}")
        self.name = name


class TemplateValidationError(LexFormError):
    """Raised when a template is missing required data or clashes by name."""


class UnsupportedFormatError(LexFormError):
    """Raised when a document is exported to a format with no renderer."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported export format: {fmt}")
        self.format = fmt


class UnreadableDocumentError(LexFormError):
    """Raised when an uploaded file cannot be decoded as an image."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"Cannot read {filename} as an image: {reason}")
        self.filename = filename
