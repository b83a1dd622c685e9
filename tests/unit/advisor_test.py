"""Tests for the advisor service and the job it proposes."""

from __future__ import annotations

import pytest

from reorder_advisor.config import AdvisorConfig
from reorder_advisor.core.advisor import AdvisorService, build_move_fact, find_solutions, propose_move
from reorder_advisor.errors import JobNotFoundError, StaleJobError
from reorder_advisor.models import Job, JobKind, Position, TextRange
from reorder_advisor.store.memory import InMemoryJobStore

SOURCE = """def ma():
    return mb()


def mb():
    return mc()


def mc():
    return 0
"""

MOVED = """def mb():
    return mc()


def ma():
    return mb()


def mc():
    return 0
"""

ORDERED = "def mc():\n    return 0\n"


class TestBuildMoveFact:
    def test_selects_declaration_under_cursor(self) -> None:
        fact = build_move_fact("mod.py", SOURCE, line=5, column=4)

        assert fact.language == "python"
        assert fact.selected_index == 1
        assert fact.character_difference == len("def mb():\n    ")
        assert fact.separator == "\n"

    def test_cursor_on_blank_line_selects_next_declaration(self) -> None:
        fact = build_move_fact("mod.py", SOURCE, line=2, column=0)
        assert fact.selected_index == 1
        assert fact.character_difference == 0

    def test_unsupported_file(self) -> None:
        fact = build_move_fact("notes.txt", "plain text\n")

        assert fact.language is None
        assert fact.top_level_nodes == ()
        assert fact.selected_index == -1
        assert [node.text for node in fact.string_nodes] == ["plain text\n"]

    def test_explicit_language_wins_over_extension(self) -> None:
        fact = build_move_fact("script", SOURCE, language="py")
        assert len(fact.top_level_nodes) == 3

    def test_selected_only_restricts_moves(self) -> None:
        fact = build_move_fact("mod.py", SOURCE, line=9, column=0)
        solutions = find_solutions(fact, AdvisorConfig(selected_only=True))
        assert solutions
        assert {solution.old_index for solution in solutions} == {2}


class TestProposeMove:
    def test_job_for_call_chain(self) -> None:
        job = propose_move("mod.py", SOURCE)

        assert job is not None
        assert job.kind is JobKind.MOVE_TOP_LEVEL_NODE
        assert job.title == "Move after mb (more ordered dependencies)"
        assert job.text == MOVED
        assert job.range == TextRange(start=Position(line=0, column=0), end=Position(line=10, column=0))
        assert job.position == Position(line=4, column=0)
        assert (job.old_index, job.new_index) == (0, 1)

    def test_cursor_follows_moved_declaration(self) -> None:
        job = propose_move("mod.py", SOURCE, line=1, column=4)
        assert job is not None
        assert job.position == Position(line=5, column=4)

    def test_trailing_comment_moves_with_its_declaration(self) -> None:
        job = propose_move("mod.py", "a = b  # a is derived from b\nb = 1\n")
        assert job is not None
        assert job.text == "b = 1\na = b  # a is derived from b\n"

    def test_no_job_for_ordered_file(self) -> None:
        assert propose_move("mod.py", ORDERED) is None

    def test_job_hash_is_deterministic(self) -> None:
        first = propose_move("mod.py", SOURCE)
        second = propose_move("mod.py", SOURCE)
        assert first is not None and second is not None
        assert first.hash == second.hash

    def test_job_hash_depends_on_path(self) -> None:
        first = propose_move("a.py", SOURCE)
        second = propose_move("b.py", SOURCE)
        assert first is not None and second is not None
        assert first.hash != second.hash

    def test_crlf_sources_keep_their_separator(self) -> None:
        job = propose_move("mod.py", SOURCE.replace("\n", "\r\n"))
        assert job is not None
        assert job.text == MOVED.replace("\n", "\r\n")
        assert job.position == Position(line=4, column=0)


class TestAdvisorService:
    def test_refresh_is_idempotent(self, advisor_service: AdvisorService, job_store: InMemoryJobStore) -> None:
        first = advisor_service.refresh("mod.py", SOURCE)
        second = advisor_service.refresh("mod.py", SOURCE)

        assert first is not None and second is not None
        assert first.hash == second.hash
        assert len(job_store.get_file_jobs("mod.py")) == 1

    def test_refresh_replaces_outdated_job(self, advisor_service: AdvisorService, job_store: InMemoryJobStore) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None

        assert advisor_service.refresh("mod.py", ORDERED) is None
        assert job_store.get_file_jobs("mod.py") == []
        assert not job_store.is_terminal(job.hash)

    def test_refresh_keeps_other_job_kinds(self, advisor_service: AdvisorService, job_store: InMemoryJobStore) -> None:
        repair = Job(
            hash="repair",
            kind=JobKind.REPAIR_CODE,
            file_path="mod.py",
            title="Fix syntax",
            range=TextRange(start=Position(line=0, column=0), end=Position(line=0, column=0)),
            text="",
            position=Position(line=0, column=0),
            fingerprint="",
        )
        job_store.upsert_jobs([repair])

        advisor_service.refresh("mod.py", SOURCE)
        advisor_service.refresh("mod.py", ORDERED)

        assert [job.hash for job in advisor_service.get_file_jobs("mod.py")] == ["repair"]

    def test_accept_returns_job_and_retires_it(
        self, advisor_service: AdvisorService, job_store: InMemoryJobStore
    ) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None

        accepted = advisor_service.accept(job.hash, SOURCE)

        assert accepted.text == MOVED
        assert job_store.get_job(job.hash) is None
        assert job_store.is_terminal(job.hash)

    def test_accept_rebuilds_text_when_only_trivia_changed(self, advisor_service: AdvisorService) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None

        accepted = advisor_service.accept(job.hash, SOURCE + "\n")

        assert accepted.hash == job.hash
        assert accepted.text == MOVED + "\n"
        assert accepted.range.end == Position(line=11, column=0)

    def test_accept_keeps_cursor_inside_moved_declaration(self, advisor_service: AdvisorService) -> None:
        job = advisor_service.refresh("mod.py", SOURCE, line=1, column=4)
        assert job is not None
        assert job.position == Position(line=5, column=4)

        accepted = advisor_service.accept(job.hash, SOURCE + "\n")

        assert accepted.text == MOVED + "\n"
        assert accepted.position == Position(line=5, column=4)

    def test_accept_stale_job(self, advisor_service: AdvisorService, job_store: InMemoryJobStore) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None

        with pytest.raises(StaleJobError):
            advisor_service.accept(job.hash, SOURCE.replace("return 0", "return 1"))
        assert job_store.get_job(job.hash) is not None

    def test_rejected_job_is_not_proposed_again(
        self, advisor_service: AdvisorService, job_store: InMemoryJobStore
    ) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None

        rejected = advisor_service.reject(job.hash)

        assert rejected.hash == job.hash
        assert advisor_service.refresh("mod.py", SOURCE) is None
        assert job_store.get_file_jobs("mod.py") == []

    def test_unknown_job(self, advisor_service: AdvisorService) -> None:
        with pytest.raises(JobNotFoundError, match="Job not found: nope"):
            advisor_service.accept("nope", SOURCE)
        with pytest.raises(JobNotFoundError):
            advisor_service.reject("nope")

    def test_forget_drops_file_jobs(self, advisor_service: AdvisorService, job_store: InMemoryJobStore) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None

        assert advisor_service.forget("mod.py") == {job.hash}
        assert job_store.list_jobs() == []

    def test_forget_allows_rejected_move_again(self, advisor_service: AdvisorService) -> None:
        job = advisor_service.refresh("mod.py", SOURCE)
        assert job is not None
        advisor_service.reject(job.hash)

        advisor_service.forget("mod.py")

        again = advisor_service.refresh("mod.py", SOURCE)
        assert again is not None
        assert again.hash == job.hash

    def test_weights_come_from_config(self, job_store: InMemoryJobStore) -> None:
        service = AdvisorService(job_store, AdvisorConfig(dependency_coefficient_weight=0))
        assert service.refresh("mod.py", SOURCE) is None
