# code_editor/logging.py
import json
import logging
import os
import re
from typing import Any, Dict, Optional

from code_editor.models import EditableFile

PII_RE = re.compile(r"([\w\.-]+)@([\w\.-]+)")  # naive email redaction
TOKEN_RE = re.compile(r"(?i)\b(bearer\s+)[\w\-\.=]+")
# Never log file payloads, only their size
CONTENT_KEYS = {"content"}


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_str(s: str) -> str:
    s = PII_RE.sub("[redacted-email]", s)
    return TOKEN_RE.sub(r"\1[redacted-token]", s)


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        return redact_str(value)
    if isinstance(value, dict):
        return redact_args(value)
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def redact_args(args: Dict[str, Any]) -> Dict[str, Any]:
    safe = json.loads(json.dumps(args, default=str))  # deep copy via JSON
    for k, v in list(safe.items()):
        if k in CONTENT_KEYS and isinstance(v, str):
            safe[k] = f"<{len(v)} chars>"
        else:
            safe[k] = _redact(v)
    return safe


def describe_file(file: EditableFile) -> Dict[str, Any]:
    return {
        "type": file.type,
        "botId": file.bot_id or None,
        "location": file.location,
        "size": len(file.content or ""),
    }


def log_tool_call(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("tool_call %s %s", name, redact_args(args))
