# server/main.py
from fastmcp import FastMCP
from code_editor.di import build_container
from code_editor.logging import configure_logging
from server.tools.editor import register_editor_tools

def create_app() -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from tool/service logic.
    """
    container = build_container()
    configure_logging(container.settings.LOG_LEVEL)

    mcp = FastMCP("CodeEditorMCP", version="0.1.0")

    # Register tools (thin adapters)
    register_editor_tools(mcp, container.editor_service)

    return mcp


if __name__ == "__main__":
    app = create_app()
    # stdio transport: client (studio backend) launches this process and speaks JSON-RPC on stdin/stdout
    app.run(transport="stdio")
