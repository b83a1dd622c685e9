from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from reorder_advisor.config import AdvisorConfig, load_config
from reorder_advisor.core.advisor import AdvisorService, build_job, build_move_fact, find_solutions
from reorder_advisor.core.coefficients import calculate_coefficient
from reorder_advisor.core.languages import resolve_language
from reorder_advisor.errors import AdvisorError
from reorder_advisor.helpers import read_source, write_source
from reorder_advisor.store.memory import InMemoryJobStore

console = Console()

PathArgument = Annotated[Path, typer.Argument(help="Source file to analyse.", exists=True, dir_okay=False)]
LineOption = Annotated[int, typer.Option(help="Zero-based cursor line.")]
ColumnOption = Annotated[int, typer.Option(help="Zero-based cursor column.")]
LanguageOption = Annotated[str | None, typer.Option(help="Language name (e.g. python, ts, java, go).")]
DependencyWeightOption = Annotated[float | None, typer.Option(help="Weight of the dependency coefficient.")]
SimilarityWeightOption = Annotated[float | None, typer.Option(help="Weight of the name similarity coefficient.")]
KindWeightOption = Annotated[float | None, typer.Option(help="Weight of the kind grouping coefficient.")]


def _config(dependency: float | None, similarity: float | None, kind: float | None) -> AdvisorConfig:
    return load_config(
        dependency_coefficient_weight=dependency,
        similarity_coefficient_weight=similarity,
        kind_coefficient_weight=kind,
    )


def _fail(message: object) -> typer.Exit:
    console.print(f"[red]{message}[/red]")
    return typer.Exit(1)


def _load(path: Path, language: str | None) -> tuple[str, str]:
    """Read ``path`` and settle the language it is parsed as."""
    try:
        resolved = resolve_language(language, path)
        return read_source(path), resolved
    except (AdvisorError, ValueError) as exc:
        raise _fail(exc) from None


def _label(identifiers: tuple[str, ...]) -> str:
    return ", ".join(name if len(name) <= 24 else name[:12] + "…" for name in identifiers)


def declarations(
    path: PathArgument,
    language: LanguageOption = None,
) -> None:
    """List the top-level declarations of a file and its current coefficients."""
    text, resolved = _load(path, language)
    fact = build_move_fact(str(path), text, language=resolved)

    table = Table(show_lines=False)
    for header in ("#", "kind", "identifiers", "references", "start", "end"):
        table.add_column(header)
    for index, node in enumerate(fact.top_level_nodes):
        table.add_row(
            str(index),
            node.kind.value,
            _label(node.identifiers),
            str(len(node.child_identifiers)),
            str(node.start),
            str(node.end),
        )
    console.print(table)

    coefficient = calculate_coefficient(fact.top_level_nodes)
    console.print(
        f"dependency={coefficient.dependency_coefficient:.3f} "
        f"similarity={coefficient.similarity_coefficient:.3f} "
        f"kind={coefficient.kind_coefficient:.3f}"
    )


def propose(
    path: PathArgument,
    line: LineOption = 0,
    column: ColumnOption = 0,
    language: LanguageOption = None,
    show_all: Annotated[bool, typer.Option("--all", help="Show every improving move, best first.")] = False,
    dependency_weight: DependencyWeightOption = None,
    similarity_weight: SimilarityWeightOption = None,
    kind_weight: KindWeightOption = None,
) -> None:
    """Show the best move for a file without changing it."""
    config = _config(dependency_weight, similarity_weight, kind_weight)
    text, resolved = _load(path, language)
    fact = build_move_fact(str(path), text, line, column, resolved)
    solutions = find_solutions(fact, config)

    if not solutions:
        console.print("[yellow]No improving move found.[/yellow]")
        return

    if show_all:
        table = Table(show_lines=False)
        for header in ("from", "to", "score", "dependency", "similarity", "kind", "reason"):
            table.add_column(header)
        for solution in solutions:
            table.add_row(
                str(solution.old_index),
                str(solution.new_index),
                f"{solution.score:.3f}",
                f"{solution.coefficient.dependency_coefficient:.3f}",
                f"{solution.coefficient.similarity_coefficient:.3f}",
                f"{solution.coefficient.kind_coefficient:.3f}",
                solution.reason or "",
            )
        console.print(table)
        console.print(f"({len(solutions)} moves)")

    job = build_job(fact, solutions[0])
    console.print(f"[green]{job.title}[/green]")
    console.print(f"Cursor after move: line {job.position.line}, column {job.position.column}")


def apply(
    path: PathArgument,
    line: LineOption = 0,
    column: ColumnOption = 0,
    language: LanguageOption = None,
    dependency_weight: DependencyWeightOption = None,
    similarity_weight: SimilarityWeightOption = None,
    kind_weight: KindWeightOption = None,
) -> None:
    """Apply the best move to a file in place."""
    service = AdvisorService(InMemoryJobStore(), _config(dependency_weight, similarity_weight, kind_weight))
    text, resolved = _load(path, language)
    job = service.refresh(str(path), text, line, column, resolved)
    if job is None:
        console.print("[yellow]No improving move found.[/yellow]")
        return

    try:
        accepted = service.accept(job.hash, read_source(path))
    except AdvisorError as exc:
        raise _fail(exc) from None

    write_source(path, accepted.text)
    console.print(f"[green]Applied[/green] {accepted.title}")
    console.print(f"Cursor after move: line {accepted.position.line}, column {accepted.position.column}")
