# code_editor/errors.py
from __future__ import annotations
from typing import Any, Dict, Iterable, Optional


class EditorError(Exception):
    """
    Base class for every terminal, request-scoped failure of the editor engine.

    Transports surface `kind` and `message` to the caller as-is; `details` only
    ever carries data the caller already sent (or the public file-type catalog).
    """

    kind = "EditorError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "details": self.details}


class UnknownFileType(EditorError):
    kind = "UnknownFileType"

    def __init__(self, file_type: str, allowed: Iterable[str]):
        allowed = list(allowed)
        super().__init__(
            f'Invalid file type "{file_type}", only {", ".join(allowed)} are allowed at the moment',
            {"type": file_type, "allowed": allowed},
        )


class CrossTenantModification(EditorError):
    kind = "CrossTenantModification"

    def __init__(self, bot_id: str):
        super().__init__(
            f"Can't perform modification on bot {bot_id}. "
            "Please switch to the correct bot to change it.",
            {"botId": bot_id},
        )


class PermissionDenied(EditorError):
    kind = "PermissionDenied"

    def __init__(self, message: str = "No permission"):
        super().__init__(message)


class InvalidJson(EditorError):
    kind = "InvalidJson"

    def __init__(self, parser_message: str):
        super().__init__(f"Invalid JSON: {parser_message}", {"parser": parser_message})


class CustomValidationFailed(EditorError):
    kind = "CustomValidationFailed"


class InvalidFilename(EditorError):
    kind = "InvalidFilename"

    def __init__(self, message: str, allowed: Optional[Iterable[str]] = None):
        details = {"allowed": list(allowed)} if allowed is not None else None
        super().__init__(message, details)
