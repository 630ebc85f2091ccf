# code_editor/services/process_env.py
"""
Restricted view of the process for user scripts.

Scripts edited in the studio are type-checked against a `process` object that
only carries a few server attributes and an allowlisted slice of the
environment. Anything not named by `ENV_ALLOWLIST` stays invisible, so a new
secret added to the environment is hidden by default.
"""
from __future__ import annotations
import json
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from code_editor.config import Settings

ROOT_ATTRIBUTES = ("HOST", "PORT", "EXTERNAL_URL", "PROXY")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@dataclass(frozen=True)
class EnvAllowlist:
    names: Tuple[str, ...]
    prefix: str

    def allows(self, name: str) -> bool:
        return name in self.names or name.startswith(self.prefix)


ENV_ALLOWLIST = EnvAllowlist(
    names=("TZ", "LANG", "LC_ALL", "LC_CTYPE", "HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY"),
    prefix="EXPOSED_",
)


@dataclass(frozen=True)
class ProcessVar:
    name: str
    value: Any
    ts_type: str


@dataclass(frozen=True)
class RestrictedProcessSnapshot:
    root: Tuple[ProcessVar, ...]
    env: Tuple[ProcessVar, ...]

    def to_runtime(self) -> Dict[str, Any]:
        runtime: Dict[str, Any] = {var.name: var.value for var in self.root}
        runtime["env"] = {var.name: var.value for var in self.env}
        return runtime


def _ts_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


def _select_env(env: Mapping[str, str], allowlist: EnvAllowlist) -> Tuple[ProcessVar, ...]:
    visible = {name for name in env if allowlist.allows(name)}
    prefixed = sorted(name for name in visible if name.startswith(allowlist.prefix))
    exact = [name for name in allowlist.names if name in visible and name not in prefixed]
    return tuple(ProcessVar(name, env[name], "string") for name in prefixed + exact)


def project(
    env: Optional[Mapping[str, str]] = None,
    settings: Optional[Settings] = None,
    allowlist: EnvAllowlist = ENV_ALLOWLIST,
) -> RestrictedProcessSnapshot:
    env = os.environ if env is None else env
    settings = settings or Settings()

    root = []
    for name in ROOT_ATTRIBUTES:
        value = getattr(settings, name)
        if value is not None:
            root.append(ProcessVar(name, value, _ts_type(value)))

    return RestrictedProcessSnapshot(root=tuple(root), env=_select_env(env, allowlist))


def _member(var: ProcessVar, indent: str) -> str:
    name = var.name if _IDENTIFIER_RE.match(var.name) else json.dumps(var.name)
    shown = str(var.value).replace("*/", "*\\/")
    return f"{indent}/** Current value: {shown} */\n{indent}{name}: {var.ts_type}\n"


def render_declaration(snapshot: RestrictedProcessSnapshot) -> str:
    root = "".join(_member(var, "    ") for var in snapshot.root)
    env = "".join(_member(var, "      ") for var in snapshot.env)
    return (
        "declare var process: RestrictedProcess;\n"
        "interface RestrictedProcess {\n"
        f"{root}"
        "    env: {\n"
        f"{env}"
        "    }\n"
        "}\n"
    )
