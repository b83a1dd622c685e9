"""FastMCP server exposing the reorder advisor commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from reorder_advisor.core.advisor import AdvisorService
from reorder_advisor.errors import AdvisorError
from reorder_advisor.helpers import read_source, write_source
from reorder_advisor.models import Job


def _job_payload(job: Job) -> dict[str, Any]:
    return job.model_dump(mode="json", include={"hash", "kind", "file_path", "title", "range", "position"})


def propose_move_command(service: AdvisorService, path: str, line: int = 0, column: int = 0) -> dict[str, Any] | None:
    try:
        text = read_source(Path(path))
    except AdvisorError as exc:
        return {"error": str(exc)}
    job = service.refresh(path, text, line, column)
    return _job_payload(job) if job is not None else None


def list_jobs_command(service: AdvisorService, path: str) -> list[dict[str, Any]]:
    return [_job_payload(job) for job in service.get_file_jobs(path)]


def accept_job_command(service: AdvisorService, job_hash: str) -> dict[str, Any]:
    job = service.store.get_job(job_hash)
    if job is None:
        return {"error": f"Job not found: {job_hash}"}
    file_path = Path(job.file_path)
    try:
        accepted = service.accept(job_hash, read_source(file_path))
    except AdvisorError as exc:
        return {"error": str(exc)}
    write_source(file_path, accepted.text)
    return _job_payload(accepted)


def reject_job_command(service: AdvisorService, job_hash: str) -> dict[str, Any]:
    try:
        return _job_payload(service.reject(job_hash))
    except AdvisorError as exc:
        return {"error": str(exc)}


def create_mcp_server(service: AdvisorService) -> FastMCP:
    """Create a FastMCP server wired to the given advisor service."""

    mcp = FastMCP("reorder-advisor", instructions="Suggest and apply reorderings of top-level declarations.")

    @mcp.tool()
    async def propose_move(path: str, line: int = 0, column: int = 0) -> dict[str, Any] | None:
        """Propose the best declaration move for a file, given the cursor position."""
        return propose_move_command(service, path, line, column)

    @mcp.tool()
    async def list_jobs(path: str) -> list[dict[str, Any]]:
        """List pending jobs of a file."""
        return list_jobs_command(service, path)

    @mcp.tool()
    async def accept_job(job_hash: str) -> dict[str, Any]:
        """Apply a pending job to its file."""
        return accept_job_command(service, job_hash)

    @mcp.tool()
    async def reject_job(job_hash: str) -> dict[str, Any]:
        """Discard a pending job without touching the file."""
        return reject_job_command(service, job_hash)

    return mcp
