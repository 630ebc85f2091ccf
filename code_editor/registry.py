# code_editor/registry.py
from __future__ import annotations
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, List

from code_editor.definitions import BUILTIN_DEFINITIONS, FileDefinition
from code_editor.errors import UnknownFileType


class FileTypeRegistry:
    """
    Immutable catalog: file type tag -> FileDefinition.
    Built once at startup; there is no way to register a type afterwards.
    """

    def __init__(self, definitions: Iterable[FileDefinition]):
        by_type = {}
        for definition in definitions:
            if definition.file_type in by_type:
                raise ValueError(f"Duplicate file type: {definition.file_type}")
            by_type[definition.file_type] = definition
        self._definitions = MappingProxyType(by_type)

    @property
    def types(self) -> List[str]:
        return sorted(self._definitions)

    def lookup(self, file_type: str) -> FileDefinition:
        definition = self._definitions.get(file_type)
        if definition is None:
            raise UnknownFileType(file_type, self.types)
        return definition

    def __contains__(self, file_type: object) -> bool:
        return file_type in self._definitions

    def __iter__(self):
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


@lru_cache(maxsize=1)
def default_registry() -> FileTypeRegistry:
    return FileTypeRegistry(BUILTIN_DEFINITIONS)
