# code_editor/config.py
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Ghost storage (local disk stand-in)
    GHOST_ROOT: Path = Path("./.ghost")

    # Process attributes exposed to user scripts
    HOST: str = "localhost"
    PORT: int = 3000
    EXTERNAL_URL: str | None = None
    PROXY: bool = False

    # HTTP MCP transport
    MCP_HTTP_ENABLED: bool = True
    MCP_HTTP_HOST: str = "127.0.0.1"
    MCP_HTTP_PORT: int = 8080
    MCP_HTTP_PATH: str = "/mcp"

    # Security: Bearer token and allowed origins
    MCP_HTTP_BEARER_TOKEN: str = "change-me"         # set in .env for prod
    MCP_HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1"
    MCP_HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"
