# code_editor/permissions.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict

from code_editor.models import ActionType, EditableFile

if TYPE_CHECKING:
    from code_editor.definitions import FileDefinition

logger = logging.getLogger(__name__)


class PermissionScope(str, Enum):
    GLOBAL = "global"
    BOT = "bot"
    ROOT = "root"


class PermissionKind(str, Enum):
    ACTIONS = "actions"
    HOOKS = "hooks"
    BOT_CONFIG = "bot_config"
    MAIN_CONFIG = "main_config"
    MODULE_CONFIG = "module_config"
    SHARED_LIBS = "shared_libs"
    ROOT = "root"
    CONTENT = "content"
    FLOWS = "flows"
    QNA = "qna"


@dataclass(frozen=True)
class PermissionKey:
    scope: PermissionScope
    kind: PermissionKind

    @classmethod
    def parse(cls, raw: str) -> "PermissionKey":
        """Parse the wire form '<scope>.<kind>' (e.g. 'bot.hooks')."""
        scope, sep, kind = raw.partition(".")
        if not sep:
            raise ValueError(f"Permission key must look like '<scope>.<kind>': {raw!r}")
        return cls(PermissionScope(scope), PermissionKind(kind))

    def __str__(self) -> str:
        return f"{self.scope.value}.{self.kind.value}"


class Grant(BaseModel):
    model_config = ConfigDict(frozen=True)

    read: bool = False
    write: bool = False

    def allows(self, action: ActionType) -> bool:
        return self.write if action == ActionType.WRITE else self.read


_NO_GRANT = Grant()


class FilePermissions:
    """
    Read-only grants of the current principal, keyed by (scope, kind).
    A key that is absent is treated as "nothing granted".
    """

    def __init__(self, grants: Optional[Mapping[PermissionKey, Grant]] = None):
        self._grants = MappingProxyType(dict(grants or {}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Union[Grant, Mapping[str, Any]]]) -> "FilePermissions":
        grants: Dict[PermissionKey, Grant] = {}
        for key, value in raw.items():
            try:
                parsed = PermissionKey.parse(key)
            except ValueError:
                # Grants for resources the editor does not handle
                logger.debug("ignoring permission key %s", key)
                continue
            grants[parsed] = value if isinstance(value, Grant) else Grant.model_validate(value)
        return cls(grants)

    def grant_for(self, scope: PermissionScope, kind: PermissionKind) -> Grant:
        return self._grants.get(PermissionKey(scope, kind), _NO_GRANT)

    def allows(self, scope: PermissionScope, kind: PermissionKind, action: ActionType) -> bool:
        return self.grant_for(scope, kind).allows(action)

    def to_mapping(self) -> Dict[str, Dict[str, bool]]:
        return {str(k): v.model_dump() for k, v in self._grants.items()}

    def __repr__(self) -> str:
        return f"FilePermissions({self.to_mapping()!r})"


def authorize(
    definition: "FileDefinition",
    file: EditableFile,
    permissions: FilePermissions,
    action: ActionType,
) -> bool:
    """
    Three independent paths, OR-ed together:

    - global: the type allows global files, the caller holds global.<kind>,
      and the file has no bot scope
    - scoped: the type allows bot files, the caller holds bot.<kind>,
      and the file has a bot scope
    - root: the type allows the root tier and the caller holds root.<kind>,
      whatever the file's scope

    All three are evaluated on every call; do not fold them into an if/else.
    """
    kind = definition.permission

    has_global_perm = definition.allow_global and permissions.allows(PermissionScope.GLOBAL, kind, action)
    has_scoped_perm = definition.allow_scoped and permissions.allows(PermissionScope.BOT, kind, action)
    has_root_perm = definition.allow_root and permissions.allows(PermissionScope.ROOT, kind, action)

    is_global_valid = definition.allow_global and not file.is_scoped
    is_scoped_valid = definition.allow_scoped and file.is_scoped

    return (has_global_perm and is_global_valid) or (has_scoped_perm and is_scoped_valid) or has_root_perm
