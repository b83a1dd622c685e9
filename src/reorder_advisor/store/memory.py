from collections.abc import Iterable

from reorder_advisor.helpers import build_file_hash
from reorder_advisor.models import Job, JobKind
from reorder_advisor.store.left_right import LeftRightHashIndex


class InMemoryJobStore:
    """Jobs keyed by hash, related to their files through a left/right hash index.

    Implements the ``JobStore`` protocol.
    """

    def __init__(self, jobs: Iterable[Job] = (), terminal_job_hashes: Iterable[str] = ()) -> None:
        self.jobs: dict[str, Job] = {}
        self.file_jobs = LeftRightHashIndex()
        self.terminal_job_hashes: set[str] = set(terminal_job_hashes)
        self.terminal_file_jobs = LeftRightHashIndex()
        self.upsert_jobs(jobs)

    def upsert_jobs(self, jobs: Iterable[Job]) -> None:
        for job in jobs:
            if job.hash in self.terminal_job_hashes:
                continue
            self.jobs[job.hash] = job
            self.file_jobs.upsert(build_file_hash(job.file_path), job.hash)

    def replace_file_jobs(self, file_path: str, kind: JobKind, jobs: Iterable[Job]) -> set[str]:
        """Swap the file's jobs of ``kind`` for ``jobs``; other kinds are kept.

        Returns the hashes of the jobs that were dropped.
        """
        jobs = list(jobs)
        incoming = {job.hash for job in jobs}
        retired: set[str] = set()
        for job in self.get_file_jobs(file_path):
            if job.kind is kind and job.hash not in incoming:
                self.retire(job.hash, terminal=False)
                retired.add(job.hash)
        self.upsert_jobs(jobs)
        return retired

    def get_job(self, job_hash: str) -> Job | None:
        return self.jobs.get(job_hash)

    def get_file_jobs(self, file_path: str) -> list[Job]:
        job_hashes = self.file_jobs.get_right_hashes_by_left_hash(build_file_hash(file_path))
        return [self.jobs[job_hash] for job_hash in sorted(job_hashes) if job_hash in self.jobs]

    def list_jobs(self) -> list[Job]:
        return list(self.jobs.values())

    def retire(self, job_hash: str, terminal: bool = True) -> Job | None:
        job = self.jobs.pop(job_hash, None)
        self.file_jobs.delete_right(job_hash)
        if terminal:
            self.terminal_job_hashes.add(job_hash)
            if job is not None:
                self.terminal_file_jobs.upsert(build_file_hash(job.file_path), job_hash)
        return job

    def is_terminal(self, job_hash: str) -> bool:
        return job_hash in self.terminal_job_hashes

    def delete_file(self, file_path: str) -> set[str]:
        """Drop the file's jobs and forget which of them were accepted or rejected."""
        file_hash = build_file_hash(file_path)
        self.terminal_job_hashes -= self.terminal_file_jobs.get_right_hashes_by_left_hash(file_hash)
        self.terminal_file_jobs.delete_left(file_hash)
        job_hashes = self.file_jobs.get_right_hashes_by_left_hash(file_hash)
        for job_hash in job_hashes:
            self.jobs.pop(job_hash, None)
        self.file_jobs.delete_left(file_hash)
        return job_hashes
