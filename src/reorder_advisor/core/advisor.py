import logging
from pathlib import Path

from reorder_advisor.config import AdvisorConfig
from reorder_advisor.core.extract import build_string_nodes, extract_declarations
from reorder_advisor.core.jobs import build_fingerprint, build_move_job
from reorder_advisor.core.languages import resolve_language
from reorder_advisor.core.ports.jobs import JobStore
from reorder_advisor.core.reconstruct import detect_line_separator, position_to_offset, reconstruct
from reorder_advisor.core.solutions import build_solutions
from reorder_advisor.errors import JobNotFoundError, StaleJobError
from reorder_advisor.models import DeclarationNode, Job, JobKind, MoveFact, Solution

logger = logging.getLogger(__name__)


def _select_declaration(nodes: list[DeclarationNode], cursor: int, line_start: int) -> int:
    for index, node in enumerate(nodes):
        if node.text_start <= cursor < node.end:
            return index
    for index, node in enumerate(nodes):
        if node.text_start >= line_start:
            return index
    return -1


def build_move_fact(
    file_path: str,
    text: str,
    line: int = 0,
    column: int = 0,
    language: str | None = None,
) -> MoveFact:
    """Extract everything one advisor run needs from a snapshot of a file."""
    separator = detect_line_separator(text)
    try:
        resolved_language: str | None = resolve_language(language, Path(file_path))
    except ValueError as exc:
        logger.debug("No declarations for %s: %s", file_path, exc)
        resolved_language = None

    if resolved_language is None:
        nodes, string_nodes = [], build_string_nodes(text, [])
    else:
        nodes, string_nodes = extract_declarations(text, resolved_language)

    cursor = position_to_offset(text, line, column, separator)
    selected_index = _select_declaration(nodes, cursor, position_to_offset(text, line, 0, separator))
    character_difference = 0
    if selected_index >= 0:
        character_difference = max(0, cursor - nodes[selected_index].text_start)

    return MoveFact(
        file_path=file_path,
        language=resolved_language,
        top_level_nodes=tuple(nodes),
        string_nodes=tuple(string_nodes),
        separator=separator,
        selected_index=selected_index,
        character_difference=character_difference,
        fingerprint=build_fingerprint(nodes),
    )


def find_solutions(fact: MoveFact, config: AdvisorConfig) -> list[Solution]:
    old_indices = None
    if config.selected_only:
        old_indices = [fact.selected_index] if fact.selected_index >= 0 else []
    return build_solutions(fact.top_level_nodes, config.weights, old_indices)


def build_job(fact: MoveFact, solution: Solution) -> Job:
    # the cursor only follows the moved declaration when it was inside it
    character_difference = fact.character_difference if solution.old_index == fact.selected_index else 0
    reconstruction = reconstruct(
        solution.old_index,
        solution.new_index,
        fact.string_nodes,
        fact.separator,
        character_difference,
    )
    return build_move_job(fact, solution, reconstruction, character_difference)


def propose_move(
    file_path: str,
    text: str,
    line: int = 0,
    column: int = 0,
    config: AdvisorConfig | None = None,
    language: str | None = None,
) -> Job | None:
    """Return the job for the best improving move of ``file_path``, if there is one."""
    config = config or AdvisorConfig()
    fact = build_move_fact(file_path, text, line, column, language)
    solutions = find_solutions(fact, config)
    if not solutions:
        return None
    return build_job(fact, solutions[0])


def _revalidate(job: Job, current_text: str) -> Job:
    fact = build_move_fact(job.file_path, current_text, language=job.language)
    if fact.fingerprint != job.fingerprint or job.old_index is None or job.new_index is None:
        raise StaleJobError(job.hash, job.file_path)
    reconstruction = reconstruct(
        job.old_index,
        job.new_index,
        fact.string_nodes,
        fact.separator,
        job.character_difference,
    )
    if reconstruction.text == job.text:
        return job
    # same declarations, different trivia
    return job.model_copy(
        update={
            "text": reconstruction.text,
            "range": reconstruction.range,
            "position": reconstruction.position,
        }
    )


class AdvisorService:
    """Keeps a file's move job in step with its latest text.

    The store is owned by the caller; the service only rewrites the
    ``moveTopLevelNode`` jobs of the file it is asked about.
    """

    def __init__(self, store: JobStore, config: AdvisorConfig | None = None) -> None:
        self._store = store
        self._config = config or AdvisorConfig()

    @property
    def config(self) -> AdvisorConfig:
        return self._config

    @property
    def store(self) -> JobStore:
        return self._store

    def refresh(
        self,
        file_path: str,
        text: str,
        line: int = 0,
        column: int = 0,
        language: str | None = None,
    ) -> Job | None:
        job = propose_move(file_path, text, line, column, self._config, language)
        if job is not None and self._store.is_terminal(job.hash):
            job = None
        retired = self._store.replace_file_jobs(file_path, JobKind.MOVE_TOP_LEVEL_NODE, [job] if job else [])
        if retired:
            logger.info("Retired %d job(s) for %s", len(retired), file_path)
        if job is not None:
            logger.info("Proposed job %s for %s: %s", job.hash[:12], file_path, job.title)
        return job

    def get_file_jobs(self, file_path: str) -> list[Job]:
        return self._store.get_file_jobs(file_path)

    def accept(self, job_hash: str, current_text: str) -> Job:
        """Retire the job and hand it back for applying, unless the file moved on since."""
        job = self._get_job(job_hash)
        if job.kind is JobKind.MOVE_TOP_LEVEL_NODE:
            job = _revalidate(job, current_text)
        self._store.retire(job_hash)
        logger.info("Accepted job %s for %s", job_hash[:12], job.file_path)
        return job

    def reject(self, job_hash: str) -> Job:
        job = self._get_job(job_hash)
        self._store.retire(job_hash)
        logger.info("Rejected job %s for %s", job_hash[:12], job.file_path)
        return job

    def forget(self, file_path: str) -> set[str]:
        return self._store.delete_file(file_path)

    def _get_job(self, job_hash: str) -> Job:
        job = self._store.get_job(job_hash)
        if job is None:
            raise JobNotFoundError(job_hash)
        return job
