# code_editor/services/editor.py
from __future__ import annotations
import asyncio
import logging
import posixpath
from typing import List, Optional, Tuple

from code_editor.config import Settings
from code_editor.definitions import HOOK_SIGNATURES, FileDefinition, HookDefinition
from code_editor.location import is_builtin
from code_editor.logging import describe_file
from code_editor.models import ActionType, EditableFile, FileLocation
from code_editor.permissions import FilePermissions, authorize
from code_editor.services.ghost import GLOBAL_SCOPE, GhostStorage, bot_scope
from code_editor.services.process_env import project, render_declaration
from code_editor.services.validator import FileValidator

logger = logging.getLogger(__name__)


class EditorService:
    """
    Read/write editable files. Every call goes through the validator first;
    storage is only touched once the request has been accepted.
    """

    def __init__(self, validator: FileValidator, storage: GhostStorage, settings: Settings):
        self.validator = validator
        self.storage = storage
        self.settings = settings

    @staticmethod
    def _scope(definition: FileDefinition, file: EditableFile) -> str:
        if file.bot_id:
            return bot_scope(file.bot_id)
        if definition.allow_global:
            return GLOBAL_SCOPE
        return ""

    async def read_file(
        self, file: EditableFile, permissions: FilePermissions, current_bot_id: Optional[str]
    ) -> str:
        definition = await self.validator.validate(file, permissions, current_bot_id, ActionType.READ)
        return await asyncio.to_thread(
            self.storage.read_text, self._scope(definition, file), definition.resolve_location(file)
        )

    async def save_file(
        self, file: EditableFile, permissions: FilePermissions, current_bot_id: Optional[str]
    ) -> FileLocation:
        definition = await self.validator.validate(file, permissions, current_bot_id, ActionType.WRITE)
        location = definition.resolve_location(file)
        await asyncio.to_thread(self.storage.write_text, self._scope(definition, file), location, file.content or "")
        logger.info("file_saved %s", describe_file(file))
        return location

    async def delete_file(
        self, file: EditableFile, permissions: FilePermissions, current_bot_id: Optional[str]
    ) -> FileLocation:
        definition = await self.validator.validate(file, permissions, current_bot_id, ActionType.WRITE)
        location = definition.resolve_location(file)
        await asyncio.to_thread(self.storage.delete, self._scope(definition, file), location)
        logger.info("file_deleted %s", describe_file(file))
        return location

    def _readable_tiers(
        self, definition: FileDefinition, permissions: FilePermissions, current_bot_id: Optional[str]
    ) -> List[Tuple[str, Optional[str]]]:
        candidates: List[Tuple[str, Optional[str]]] = []
        if definition.allow_global:
            candidates.append((GLOBAL_SCOPE, None))
        if definition.allow_scoped and current_bot_id:
            candidates.append((bot_scope(current_bot_id), current_bot_id))
        if not (definition.allow_global or definition.allow_scoped):
            candidates.append(("", None))

        tiers = []
        for scope, bot_id in candidates:
            tier_file = EditableFile(type=definition.file_type, bot_id=bot_id)
            if authorize(definition, tier_file, permissions, ActionType.READ):
                tiers.append((scope, bot_id))
        return tiers

    async def list_files(
        self,
        file_type: str,
        permissions: FilePermissions,
        current_bot_id: Optional[str],
        include_builtin: bool = False,
    ) -> List[EditableFile]:
        """List files of one type across every tier the caller may read."""
        definition = self.validator.registry.lookup(file_type)

        files: List[EditableFile] = []
        for scope, bot_id in self._readable_tiers(definition, permissions, current_bot_id):
            paths = await asyncio.to_thread(self.storage.list_files, scope, definition.base_dir)
            for path in paths:
                if definition.filenames is not None and path not in definition.filenames:
                    continue
                if not include_builtin and is_builtin(path):
                    continue
                hook_type = None
                if isinstance(definition, HookDefinition):
                    hook_type = path.split("/", 1)[0] if "/" in path else None
                    # Folders that are not hook types cannot be read back
                    if hook_type not in HOOK_SIGNATURES:
                        continue
                files.append(EditableFile(
                    type=file_type,
                    name=posixpath.basename(path),
                    location=path,
                    bot_id=bot_id,
                    hook_type=hook_type,
                ))
        return files

    def process_typings(self) -> str:
        return render_declaration(project(settings=self.settings))
