# server/registry.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Type
from pydantic import BaseModel

from code_editor.di import Container
from code_editor.logging import log_tool_call

# Import only the Pydantic input models from the tool module.
from server.tools.editor import FileListIn, FileRequestIn, FileValidateIn, ProcessTypingsIn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Awaitable[Any]]


class ToolHandlers:
    """
    Named handlers for each tool (no lambdas).
    Keeps all cross-cutting logic and observability in one place.
    """
    def __init__(self, container: Container):
        self.container = container

    async def file_validate(self, args: FileValidateIn) -> dict:
        definition = await self.container.validator.validate(
            args.file, args.grants(), args.current_bot_id, args.action
        )
        return {"ok": True, **definition.resolve_location(args.file)._asdict()}

    async def file_read(self, args: FileRequestIn) -> str:
        return await self.container.editor_service.read_file(args.file, args.grants(), args.current_bot_id)

    async def file_save(self, args: FileRequestIn) -> dict:
        location = await self.container.editor_service.save_file(args.file, args.grants(), args.current_bot_id)
        return location._asdict()

    async def file_delete(self, args: FileRequestIn) -> dict:
        location = await self.container.editor_service.delete_file(args.file, args.grants(), args.current_bot_id)
        return location._asdict()

    async def file_list(self, args: FileListIn) -> list:
        files = await self.container.editor_service.list_files(
            args.type, args.grants(), args.current_bot_id, args.include_builtin
        )
        return [f.model_dump(by_alias=True, exclude={"content"}) for f in files]

    async def process_typings(self, args: ProcessTypingsIn) -> str:
        return self.container.editor_service.process_typings()


def _schema_from_model(model: Type[BaseModel]) -> Dict[str, Any]:
    return model.model_json_schema()


def build_tool_registry(container: Container) -> Dict[str, ToolSpec]:
    """
    Build a registry once at startup.
    Transport layers (stdio/HTTP) read from this registry to expose tools.
    """
    handlers = ToolHandlers(container)

    specs = [
        ToolSpec(
            name="file_validate",
            description="Check whether a file read/write would be accepted",
            input_model=FileValidateIn,
            handler=handlers.file_validate,
        ),
        ToolSpec(
            name="file_read",
            description="Read an editable file from ghost storage",
            input_model=FileRequestIn,
            handler=handlers.file_read,
        ),
        ToolSpec(
            name="file_save",
            description="Validate and write an editable file to ghost storage",
            input_model=FileRequestIn,
            handler=handlers.file_save,
        ),
        ToolSpec(
            name="file_delete",
            description="Validate and delete an editable file",
            input_model=FileRequestIn,
            handler=handlers.file_delete,
        ),
        ToolSpec(
            name="file_list",
            description="List files of one type the caller may read",
            input_model=FileListIn,
            handler=handlers.file_list,
        ),
        ToolSpec(
            name="process_typings",
            description="Type declaration of the restricted `process` for scripts",
            input_model=ProcessTypingsIn,
            handler=handlers.process_typings,
        ),
    ]
    return {spec.name: spec for spec in specs}


def list_tools_payload(registry: Dict[str, ToolSpec]) -> Dict[str, Any]:
    """
    Produce the `tools/list` payload body as per MCP Tools spec.
    """
    tools = []
    for spec in registry.values():
        tools.append({
            "name": spec.name,
            "description": spec.description,
            "inputSchema": _schema_from_model(spec.input_model),
        })
    return {"tools": tools}


async def dispatch_tool_call(registry: Dict[str, ToolSpec], name: str, arguments: Dict[str, Any]) -> Any:
    """
    Validate args with the tool's Pydantic model, then invoke the named handler.
    """
    if name not in registry:
        raise KeyError(f"Tool not found: {name}")
    spec = registry[name]
    log_tool_call(logger, name, arguments)
    args_obj = spec.input_model.model_validate(arguments)
    return await spec.handler(args_obj)
