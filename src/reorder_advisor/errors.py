class AdvisorError(Exception):
    """Base class for advisor failures surfaced to callers."""


class InvalidMoveError(AdvisorError, ValueError):
    def __init__(self, length: int, old_index: int, new_index: int) -> None:
        super().__init__(f"Cannot move declaration {old_index} to {new_index} in a list of {length} declarations")
        self.length = length
        self.old_index = old_index
        self.new_index = new_index


class StaleJobError(AdvisorError):
    def __init__(self, job_hash: str, file_path: str) -> None:
        super().__init__(f"Job {job_hash} is stale: {file_path} changed since it was proposed")
        self.job_hash = job_hash
        self.file_path = file_path


class JobNotFoundError(AdvisorError, KeyError):
    def __init__(self, job_hash: str) -> None:
        super().__init__(job_hash)
        self.job_hash = job_hash

    def __str__(self) -> str:
        return f"Job not found: {self.job_hash}"


class SourceDecodeError(AdvisorError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot decode {path} as UTF-8")
        self.path = path
