import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console(stderr=True)


@serve_app.callback()
def _serve() -> None:
    """Start servers."""


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
) -> None:
    """Start the MCP server."""
    from reorder_advisor.config import load_config
    from reorder_advisor.core.advisor import AdvisorService
    from reorder_advisor.mcp.server import create_mcp_server
    from reorder_advisor.store.memory import InMemoryJobStore

    service = AdvisorService(InMemoryJobStore(), load_config())
    server = create_mcp_server(service)
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
