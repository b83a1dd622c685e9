from collections.abc import Iterable
from typing import Protocol

from reorder_advisor.models import Job, JobKind


class JobStore(Protocol):
    def upsert_jobs(self, jobs: Iterable[Job]) -> None: ...

    def replace_file_jobs(self, file_path: str, kind: JobKind, jobs: Iterable[Job]) -> set[str]: ...

    def get_job(self, job_hash: str) -> Job | None: ...

    def get_file_jobs(self, file_path: str) -> list[Job]: ...

    def list_jobs(self) -> list[Job]: ...

    def retire(self, job_hash: str, terminal: bool = True) -> Job | None: ...

    def is_terminal(self, job_hash: str) -> bool: ...

    def delete_file(self, file_path: str) -> set[str]: ...
