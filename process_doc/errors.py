"""
Errors raised at the export boundary. Parsing and styling never raise.
"""


class ExportError(Exception):
    """Base class for export failures reported to the caller."""
    kind = "ExportError"


class MissingTitleError(ExportError):
    kind = "MissingTitle"

    def __init__(self, message: str = "Document title is empty; nothing to export"):
        super().__init__(message)


class RenderFailureError(ExportError):
    kind = "RenderFailure"


class ExportInProgressError(ExportError):
    kind = "ExportInProgress"
