# server/tools/editor.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from fastmcp import FastMCP

from code_editor.models import ActionType, EditableFile
from code_editor.permissions import FilePermissions, Grant


class FileRequestIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file: EditableFile = Field(..., description="File as sent by the studio")
    permissions: Dict[str, Grant] = Field(
        default_factory=dict, description="Caller grants keyed '<scope>.<kind>', e.g. 'bot.hooks'"
    )
    current_bot_id: Optional[str] = Field(
        None, alias="currentBotId", description="Bot the caller is currently working on"
    )

    def grants(self) -> FilePermissions:
        return FilePermissions.from_mapping(self.permissions)


class FileValidateIn(FileRequestIn):
    action: ActionType = Field(ActionType.WRITE, description="'read' or 'write'")


class FileListIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., description="File type tag to list")
    permissions: Dict[str, Grant] = Field(default_factory=dict)
    current_bot_id: Optional[str] = Field(None, alias="currentBotId")
    include_builtin: bool = Field(
        False, alias="includeBuiltin", description="Also list files of built-in modules"
    )

    def grants(self) -> FilePermissions:
        return FilePermissions.from_mapping(self.permissions)


class ProcessTypingsIn(BaseModel):
    pass


def register_editor_tools(mcp: FastMCP, editor_service):
    """
    Very thin tool adapters:
    - validate/deserialize inputs (Pydantic)
    - call the service (validation + storage)
    - return the result
    """
    validator = editor_service.validator

    @mcp.tool(name="file_validate", description="Check whether a file read/write would be accepted")
    async def file_validate(input: FileValidateIn) -> Dict[str, Any]:
        definition = await validator.validate(input.file, input.grants(), input.current_bot_id, input.action)
        return {"ok": True, **definition.resolve_location(input.file)._asdict()}

    @mcp.tool(name="file_read", description="Read an editable file from ghost storage")
    async def file_read(input: FileRequestIn) -> str:
        return await editor_service.read_file(input.file, input.grants(), input.current_bot_id)

    @mcp.tool(name="file_save", description="Validate and write an editable file to ghost storage")
    async def file_save(input: FileRequestIn) -> Dict[str, Any]:
        location = await editor_service.save_file(input.file, input.grants(), input.current_bot_id)
        return location._asdict()

    @mcp.tool(name="file_delete", description="Validate and delete an editable file")
    async def file_delete(input: FileRequestIn) -> Dict[str, Any]:
        location = await editor_service.delete_file(input.file, input.grants(), input.current_bot_id)
        return location._asdict()

    @mcp.tool(name="file_list", description="List files of one type the caller may read")
    async def file_list(input: FileListIn) -> List[Dict[str, Any]]:
        files = await editor_service.list_files(
            input.type, input.grants(), input.current_bot_id, input.include_builtin
        )
        return [f.model_dump(by_alias=True, exclude={"content"}) for f in files]

    @mcp.tool(name="process_typings", description="Type declaration of the restricted `process` for scripts")
    def process_typings(input: ProcessTypingsIn) -> str:
        return editor_service.process_typings()
