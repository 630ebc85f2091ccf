# tests/test_editor.py
import json
import threading
from pathlib import Path

import pytest

from code_editor.config import Settings
from code_editor.di import build_container
from code_editor.errors import CrossTenantModification, InvalidFilename, PermissionDenied
from code_editor.models import EditableFile, FileLocation
from code_editor.permissions import FilePermissions
from code_editor.services.editor import EditorService
from code_editor.services.ghost import GLOBAL_SCOPE, GhostStorage, bot_scope

ALL_BOT = FilePermissions.from_mapping({
    "bot.hooks": {"read": True, "write": True},
    "bot.bot_config": {"read": True, "write": True},
    "bot.actions": {"read": True, "write": True},
})
ALL_GLOBAL = FilePermissions.from_mapping({
    "global.hooks": {"read": True, "write": True},
    "global.actions": {"read": True, "write": True},
})


@pytest.fixture
def container(tmp_path: Path):
    return build_container(Settings(GHOST_ROOT=tmp_path))


def hook_file(**overrides):
    data = {
        "type": "hook",
        "name": "greet.js",
        "location": "before_incoming_middleware/greet.js",
        "hookType": "before_incoming_middleware",
        "botId": "bot1",
        "content": "// hello",
    }
    data.update(overrides)
    return EditableFile(**data)


def test_ghost_sandbox_prevents_escape(tmp_path: Path):
    ghost = GhostStorage(tmp_path)
    ghost.write_text(GLOBAL_SCOPE, FileLocation("/hooks", "ok.js"), "ok")
    assert ghost.read_text(GLOBAL_SCOPE, FileLocation("/hooks", "ok.js")) == "ok"
    assert (tmp_path / "global" / "hooks" / "ok.js").exists()
    with pytest.raises(PermissionError):
        ghost.read_text(GLOBAL_SCOPE, FileLocation("/", "../../escape.txt"))
    assert ghost.list_files(bot_scope("nobody"), "/hooks") == []


@pytest.mark.asyncio
async def test_save_then_read_scoped_hook(container, tmp_path: Path):
    editor = container.editor_service
    location = await editor.save_file(hook_file(), ALL_BOT, "bot1")
    assert location == FileLocation("/hooks/before_incoming_middleware", "greet.js")
    assert (tmp_path / "bots/bot1/hooks/before_incoming_middleware/greet.js").read_text() == "// hello"

    content = await editor.read_file(hook_file(content=None), ALL_BOT, "bot1")
    assert content == "// hello"


@pytest.mark.asyncio
async def test_rejected_write_touches_nothing(container, tmp_path: Path):
    editor = container.editor_service
    with pytest.raises(CrossTenantModification):
        await editor.save_file(hook_file(), ALL_BOT, "bot2")
    with pytest.raises(PermissionDenied):
        await editor.save_file(hook_file(), ALL_GLOBAL, "bot1")
    assert not any(tmp_path.iterdir())


@pytest.mark.asyncio
async def test_folder_only_hook_location_writes_nothing(container, tmp_path: Path):
    editor = container.editor_service
    with pytest.raises(InvalidFilename):
        await editor.save_file(hook_file(location=""), ALL_BOT, "bot1")
    assert not any(tmp_path.iterdir())

    # the hook folder stays usable for valid writes
    await editor.save_file(hook_file(), ALL_BOT, "bot1")
    assert (tmp_path / "bots/bot1/hooks/before_incoming_middleware").is_dir()


class RecordingStorage(GhostStorage):
    def __init__(self, root):
        super().__init__(root)
        self.threads = set()

    def write_text(self, scope, location, content):
        self.threads.add(threading.get_ident())
        return super().write_text(scope, location, content)

    def read_text(self, scope, location):
        self.threads.add(threading.get_ident())
        return super().read_text(scope, location)


@pytest.mark.asyncio
async def test_storage_io_runs_off_the_event_loop(container, tmp_path: Path):
    storage = RecordingStorage(tmp_path)
    editor = EditorService(container.validator, storage, container.settings)
    await editor.save_file(hook_file(), ALL_BOT, "bot1")
    assert await editor.read_file(hook_file(content=None), ALL_BOT, "bot1") == "// hello"
    assert storage.threads
    assert threading.get_ident() not in storage.threads


@pytest.mark.asyncio
async def test_location_cannot_reach_another_bot(container, tmp_path: Path):
    other = tmp_path / "bots/bot2/actions/secret.js"
    other.parent.mkdir(parents=True)
    other.write_text("secret")

    file = EditableFile(type="action_legacy", name="secret.js", location="../../bot2/actions/secret.js", botId="bot1")
    with pytest.raises(InvalidFilename):
        await container.editor_service.read_file(file, ALL_BOT, "bot1")


@pytest.mark.asyncio
async def test_bot_config_round_trip_and_delete(container, tmp_path: Path):
    editor = container.editor_service
    file = EditableFile(
        type="bot_config", name="bot.config.json", location="bot.config.json",
        botId="bot1", content=json.dumps({"id": "bot1", "name": "Bot"}),
    )
    await editor.save_file(file, ALL_BOT, "bot1")
    assert json.loads((tmp_path / "bots/bot1/bot.config.json").read_text())["name"] == "Bot"

    await editor.delete_file(file, ALL_BOT, "bot1")
    assert not (tmp_path / "bots/bot1/bot.config.json").exists()


@pytest.mark.asyncio
async def test_list_files_by_tier_and_builtin_exclusion(container, tmp_path: Path):
    editor = container.editor_service
    ghost = container.storage
    ghost.write_text(GLOBAL_SCOPE, FileLocation("/actions", "global_action.js"), "")
    ghost.write_text(GLOBAL_SCOPE, FileLocation("/actions", "builtin/sendText.js"), "")
    ghost.write_text(bot_scope("bot1"), FileLocation("/actions", "mine.js"), "")
    ghost.write_text(bot_scope("bot2"), FileLocation("/actions", "theirs.js"), "")

    both = FilePermissions.from_mapping({
        "global.actions": {"read": True},
        "bot.actions": {"read": True},
    })
    files = await editor.list_files("action_legacy", both, "bot1")
    assert [(f.location, f.bot_id) for f in files] == [("global_action.js", None), ("mine.js", "bot1")]

    files = await editor.list_files("action_legacy", both, "bot1", include_builtin=True)
    assert "builtin/sendText.js" in [f.location for f in files]

    only_bot = FilePermissions.from_mapping({"bot.actions": {"read": True}})
    files = await editor.list_files("action_legacy", only_bot, "bot1")
    assert [f.location for f in files] == ["mine.js"]


@pytest.mark.asyncio
async def test_list_hooks_sets_hook_type(container):
    editor = container.editor_service
    await editor.save_file(hook_file(), ALL_BOT, "bot1")
    files = await editor.list_files("hook", ALL_BOT, "bot1")
    assert len(files) == 1
    assert files[0].hook_type == "before_incoming_middleware"
    assert files[0].location == "before_incoming_middleware/greet.js"
    # a listed file can be read back as-is
    assert await editor.read_file(files[0], ALL_BOT, "bot1") == "// hello"


@pytest.mark.asyncio
async def test_list_hooks_skips_unknown_folders(container):
    editor = container.editor_service
    container.storage.write_text(bot_scope("bot1"), FileLocation("/hooks", "not_a_hook/x.js"), "")
    container.storage.write_text(bot_scope("bot1"), FileLocation("/hooks", "loose.js"), "")
    await editor.save_file(hook_file(), ALL_BOT, "bot1")

    files = await editor.list_files("hook", ALL_BOT, "bot1")
    assert [f.location for f in files] == ["before_incoming_middleware/greet.js"]
    for file in files:
        await editor.read_file(file, ALL_BOT, "bot1")


def test_process_typings_uses_settings(container):
    typings = container.editor_service.process_typings()
    assert "declare var process: RestrictedProcess;" in typings
    assert "PORT: number" in typings
