# code_editor/di.py
from dataclasses import dataclass
from code_editor.config import Settings
from code_editor.registry import FileTypeRegistry, default_registry
from code_editor.services.editor import EditorService
from code_editor.services.ghost import GhostStorage
from code_editor.services.validator import FileValidator

@dataclass
class Container:
    settings: Settings
    registry: FileTypeRegistry
    validator: FileValidator
    storage: GhostStorage
    editor_service: EditorService

def build_container(settings: Settings | None = None) -> Container:
    s = settings or Settings()
    registry = default_registry()
    validator = FileValidator(registry)
    storage = GhostStorage(s.GHOST_ROOT)
    editor = EditorService(validator, storage, s)

    return Container(s, registry, validator, storage, editor)
