# code_editor/definitions.py
"""
File type definitions.

Each file type the editor understands is one frozen `FileDefinition` (or a
subclass of it). A subclass customizes the shared capability interface:

- `upsert_location` / `upsert_filename`: compute a non-default folder or
  filename from the file itself (falsy result -> default)
- `validate_content`: async rule returning a failure message, or None

The built-in catalog lives at the bottom of this module.
"""
from __future__ import annotations
import json
import posixpath
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from jsonschema import Draft202012Validator

from code_editor.models import EditableFile, FileLocation
from code_editor.permissions import PermissionKind


@dataclass(frozen=True)
class FileDefinition:
    file_type: str
    base_dir: str
    permission: PermissionKind
    allow_global: bool = False
    allow_scoped: bool = False
    allow_root: bool = False
    is_json: bool = False
    filenames: Optional[Tuple[str, ...]] = None
    # Raw files carry a complete folder path in their name
    allow_nested_paths: bool = False

    def upsert_location(self, file: EditableFile) -> Optional[str]:
        return None

    def upsert_filename(self, file: EditableFile) -> Optional[str]:
        return None

    def resolve_location(self, file: EditableFile) -> FileLocation:
        folder = self.upsert_location(file) or self.base_dir
        filename = self.upsert_filename(file) or file.location
        return FileLocation(folder, filename)

    async def validate_content(self, file: EditableFile, is_write: bool) -> Optional[str]:
        return None


@dataclass(frozen=True)
class ActionDefinition(FileDefinition):
    async def validate_content(self, file: EditableFile, is_write: bool) -> Optional[str]:
        if not file.location.endswith(".js"):
            return "Actions must be JavaScript files (.js)"
        return None


HOOK_SIGNATURES = frozenset({
    "after_bot_mount",
    "after_bot_unmount",
    "after_event_processed",
    "after_incoming_middleware",
    "after_server_start",
    "after_stage_changed",
    "before_bot_import",
    "before_incoming_middleware",
    "before_outgoing_middleware",
    "before_session_timeout",
    "before_suggestions_election",
    "on_bot_error",
    "on_incident_status_changed",
    "on_stage_request",
})

# Server-wide events, never fired for a single bot
GLOBAL_ONLY_HOOKS = frozenset({
    "after_server_start",
    "after_bot_mount",
    "after_bot_unmount",
    "before_bot_import",
    "on_incident_status_changed",
    "on_stage_request",
    "after_stage_changed",
})


@dataclass(frozen=True)
class HookDefinition(FileDefinition):
    """Hooks are stored in one folder per hook type: /hooks/<hookType>/<file>."""

    def upsert_location(self, file: EditableFile) -> Optional[str]:
        if not file.hook_type:
            return None
        return f"{self.base_dir}/{file.hook_type}"

    def upsert_filename(self, file: EditableFile) -> Optional[str]:
        if not file.hook_type:
            return None
        prefix = f"{file.hook_type}/"
        if file.location.startswith(prefix):
            return file.location[len(prefix):]
        return file.location

    async def validate_content(self, file: EditableFile, is_write: bool) -> Optional[str]:
        if file.hook_type and file.hook_type not in HOOK_SIGNATURES:
            return f'Invalid hook type "{file.hook_type}"'
        if not is_write:
            return None
        if not file.hook_type:
            return "Hook type is required"
        if file.is_scoped and file.hook_type in GLOBAL_ONLY_HOOKS:
            return f'Hook "{file.hook_type}" can only be global'
        return None


BOT_CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "description": {"type": "string"},
        "disabled": {"type": "boolean"},
        "private": {"type": "boolean"},
        "defaultLanguage": {"type": "string"},
        "languages": {"type": "array", "items": {"type": "string"}},
        "imports": {"type": "object"},
        "dialog": {"type": "object"},
        "logs": {"type": "object"},
    },
    "required": ["id"],
}


@dataclass(frozen=True)
class BotConfigDefinition(FileDefinition):
    async def validate_content(self, file: EditableFile, is_write: bool) -> Optional[str]:
        if not file.content:
            return None

        config = json.loads(file.content)
        errors = sorted(Draft202012Validator(BOT_CONFIG_SCHEMA).iter_errors(config), key=lambda e: [str(p) for p in e.path])
        if errors:
            first = errors[0]
            path = "/" + "/".join(str(p) for p in first.path)
            return f"Invalid bot configuration at {path}: {first.message}"

        if is_write and config["id"] != file.bot_id:
            return "The bot ID cannot be changed from the editor"
        return None


@dataclass(frozen=True)
class ModuleConfigDefinition(FileDefinition):
    async def validate_content(self, file: EditableFile, is_write: bool) -> Optional[str]:
        if "/" in file.location or not file.location.endswith(".json"):
            return "Module configuration must be a <module>.json file"
        return None


@dataclass(frozen=True)
class RawDefinition(FileDefinition):
    async def validate_content(self, file: EditableFile, is_write: bool) -> Optional[str]:
        for path in (file.name, file.location):
            if posixpath.isabs(path) or "\\" in path:
                return "Raw file paths must be relative"
            if ".." in path.split("/"):
                return "Raw file paths cannot contain '..'"
        return None


RAW_TYPE = "raw"

BUILTIN_DEFINITIONS: Tuple[FileDefinition, ...] = (
    ActionDefinition(
        file_type="action_legacy",
        base_dir="/actions",
        permission=PermissionKind.ACTIONS,
        allow_global=True,
        allow_scoped=True,
    ),
    ActionDefinition(
        file_type="action_http",
        base_dir="/actions",
        permission=PermissionKind.ACTIONS,
        allow_scoped=True,
    ),
    HookDefinition(
        file_type="hook",
        base_dir="/hooks",
        permission=PermissionKind.HOOKS,
        allow_global=True,
        allow_scoped=True,
    ),
    BotConfigDefinition(
        file_type="bot_config",
        base_dir="/",
        permission=PermissionKind.BOT_CONFIG,
        allow_scoped=True,
        is_json=True,
        filenames=("bot.config.json",),
    ),
    FileDefinition(
        file_type="main_config",
        base_dir="/",
        permission=PermissionKind.MAIN_CONFIG,
        allow_global=True,
        is_json=True,
        filenames=("botpress.config.json", "workspaces.json"),
    ),
    ModuleConfigDefinition(
        file_type="module_config",
        base_dir="/config",
        permission=PermissionKind.MODULE_CONFIG,
        allow_global=True,
        allow_scoped=True,
        is_json=True,
    ),
    FileDefinition(
        file_type="shared_libs",
        base_dir="/libraries",
        permission=PermissionKind.SHARED_LIBS,
        allow_global=True,
        allow_scoped=True,
    ),
    RawDefinition(
        file_type=RAW_TYPE,
        base_dir="/",
        permission=PermissionKind.ROOT,
        allow_root=True,
        allow_nested_paths=True,
    ),
)
