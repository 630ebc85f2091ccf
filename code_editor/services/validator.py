# code_editor/services/validator.py
"""
Validation of editor file requests.

`FileValidator.validate` is the single gate in front of every ghost read or
write. Checks run in a fixed order and the first failure is raised:

1. the file type must be registered
2. a bot-scoped file must belong to the caller's current bot
3. the caller must hold a grant for a tier the type and the file allow
4. content checks: JSON, custom rule, non-empty location, filename allowlist,
   filename pattern (on the name, and on every segment of the location)

Nothing here keeps state between calls; the same inputs always give the same
outcome.
"""
from __future__ import annotations
import json
import logging
import re
from typing import Optional

from code_editor.definitions import FileDefinition
from code_editor.errors import (
    CrossTenantModification,
    CustomValidationFailed,
    EditorError,
    InvalidFilename,
    InvalidJson,
    PermissionDenied,
)
from code_editor.logging import describe_file
from code_editor.models import ActionType, EditableFile
from code_editor.permissions import FilePermissions, authorize
from code_editor.registry import FileTypeRegistry, default_registry

logger = logging.getLogger(__name__)

FILENAME_REGEX = re.compile(r"^[0-9a-zA-Z_\-.]+$")


def assert_same_tenant(file: EditableFile, current_bot_id: Optional[str]) -> None:
    if file.bot_id and file.bot_id != current_bot_id:
        raise CrossTenantModification(file.bot_id)


def assert_valid_json(content: str) -> None:
    try:
        json.loads(content)
    except ValueError as e:
        raise InvalidJson(str(e)) from e


def assert_valid_filename(filename: str) -> None:
    if not FILENAME_REGEX.fullmatch(filename) or filename in (".", ".."):
        raise InvalidFilename("Filename has invalid characters")


def assert_location_present(location: str) -> None:
    if not location or location.endswith("/"):
        raise InvalidFilename("File location must name a file")


def assert_valid_location(location: str) -> None:
    """Each folder segment of a relative location must itself be a valid filename."""
    for segment in location.split("/"):
        assert_valid_filename(segment)


def assert_allowed_filename(definition: FileDefinition, location: str) -> None:
    if definition.filenames is not None and location not in definition.filenames:
        raise InvalidFilename(
            f"Invalid file name. Must match {', '.join(definition.filenames)}",
            allowed=definition.filenames,
        )


async def run_custom_validator(definition: FileDefinition, file: EditableFile, is_write: bool) -> None:
    try:
        result = await definition.validate_content(file, is_write)
    except CustomValidationFailed:
        raise
    except Exception as e:
        # Validator crashes are reported like declared failures
        raise CustomValidationFailed(str(e) or e.__class__.__name__) from e
    if result:
        raise CustomValidationFailed(result)


async def check_content(definition: FileDefinition, file: EditableFile, action: ActionType) -> None:
    if definition.is_json and file.content:
        assert_valid_json(file.content)

    await run_custom_validator(definition, file, action == ActionType.WRITE)

    assert_location_present(file.location)
    assert_allowed_filename(definition, file.location)

    if not definition.allow_nested_paths:
        assert_valid_filename(file.name)
        assert_valid_location(file.location)


class FileValidator:
    def __init__(self, registry: FileTypeRegistry):
        self.registry = registry

    async def validate(
        self,
        file: EditableFile,
        permissions: FilePermissions,
        current_bot_id: Optional[str],
        action: ActionType,
    ) -> FileDefinition:
        """
        Raise the first EditorError encountered, or return the file's definition
        when the request may proceed to storage.
        """
        action = ActionType(action)
        try:
            definition = self.registry.lookup(file.type)
            assert_same_tenant(file, current_bot_id)
            if not authorize(definition, file, permissions, action):
                raise PermissionDenied()
            await check_content(definition, file, action)
        except EditorError as e:
            logger.info("file_denied %s %s %s", action.value, e.kind, describe_file(file))
            raise
        logger.debug("file_allowed %s %s", action.value, describe_file(file))
        return definition


async def validate_file_payload(
    file: EditableFile,
    permissions: FilePermissions,
    current_bot_id: Optional[str],
    action: ActionType,
) -> FileDefinition:
    return await FileValidator(default_registry()).validate(file, permissions, current_bot_id, action)
