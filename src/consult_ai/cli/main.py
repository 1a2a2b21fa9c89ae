"""CLI for consult-ai: compare / compare-meds / synthesize / serve commands."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from consult_ai.comparison import ReportComparator, compare_medications
from consult_ai.core.config import AppSettings
from consult_ai.exceptions import ConsultError
from consult_ai.models import ComparisonResult, StructuredReport, SynthesisResult
from consult_ai.providers.embeddings import EmbeddingClient
from consult_ai.providers.llm import LLMClient
from consult_ai.synthesis import ReportSynthesizer

app = typer.Typer(name="consult-ai", help="Consultation report synthesis and doctor-report comparison")
console = Console()


def _build_settings(
    base_url: Optional[str],
    api_key: Optional[str],
    model: Optional[str],
) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    overrides: dict[str, Any] = {}
    if base_url:
        overrides["base_url"] = base_url
    if api_key:
        overrides["api_key"] = api_key
    if model:
        overrides["model"] = model
    if overrides:
        settings.llm = settings.llm.model_copy(update=overrides)
    return settings


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{path} is not valid JSON: {e}") from e


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
def compare(
    ai_report_file: Path = typer.Argument(..., help="JSON file with the AI structured report"),
    doctor_report_file: Path = typer.Argument(..., help="Text file with the doctor's report"),
    no_summary: bool = typer.Option(False, "--no-summary", help="Skip the LLM summary"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="LLM base URL"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="LLM API key"),
    model: Optional[str] = typer.Option(None, "--model", help="LLM model name"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Score a doctor report against an AI consultation report."""
    _configure_logging(verbose)
    settings = _build_settings(base_url, api_key, model)
    if no_summary:
        settings.comparison = settings.comparison.model_copy(update={"enable_summary": False})

    report = StructuredReport.model_validate(_load_json(ai_report_file))
    doctor_text = doctor_report_file.read_text(encoding="utf-8")

    comparator = ReportComparator(
        embeddings=EmbeddingClient(settings.embedding, settings.llm),
        llm=LLMClient(settings.llm),
        config=settings.comparison,
    )

    async def _run() -> ComparisonResult:
        return await comparator.compare(report, doctor_text)

    try:
        result = asyncio.run(_run())
    except ConsultError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"\n[bold]Similarity:[/bold] {result.similarity:.2f}%  [dim]({result.mode})[/dim]")
    if result.summary:
        console.print(f"[bold]Summary:[/bold] {result.summary}\n")

    table = Table(title="Closest Doctor Sentences")
    table.add_column("Score", style="cyan", justify="right")
    table.add_column("Sentence", max_width=80)
    for match in result.matches:
        table.add_row(f"{match.similarity:.4f}", match.sentence)
    console.print(table)


@app.command("compare-meds")
def compare_meds(
    ai_meds: list[str] = typer.Option([], "--ai", help="AI-recommended medication (repeatable)"),
    doctor_meds: list[str] = typer.Option([], "--doctor", help="Doctor-prescribed medication (repeatable)"),
) -> None:
    """Jaccard comparison of two medication lists."""
    result = compare_medications(ai_meds, doctor_meds)

    console.print(f"[bold]Jaccard score:[/bold] {result.jaccard_score:.2f}")
    table = Table()
    table.add_column("Both", style="green")
    table.add_column("AI only", style="yellow")
    table.add_column("Doctor only", style="magenta")
    rows = max(len(result.intersection), len(result.ai_only), len(result.doctor_only))
    for i in range(rows):
        table.add_row(
            result.intersection[i] if i < len(result.intersection) else "",
            result.ai_only[i] if i < len(result.ai_only) else "",
            result.doctor_only[i] if i < len(result.doctor_only) else "",
        )
    console.print(table)


@app.command()
def synthesize(
    transcript_file: Path = typer.Argument(..., help="JSON array of {role, text} turns"),
    session_details_file: Path = typer.Argument(..., help="JSON file with session details"),
    session_id: str = typer.Option(..., "--session-id", help="Consultation session id"),
    output: Optional[Path] = typer.Option(None, help="Output path for the report JSON"),
    base_url: Optional[str] = typer.Option(None, "--base-url"),
    api_key: Optional[str] = typer.Option(None, "--api-key"),
    model: Optional[str] = typer.Option(None, "--model"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate a structured report from a consultation transcript."""
    _configure_logging(verbose)
    settings = _build_settings(base_url, api_key, model)

    transcript = _load_json(transcript_file)
    if not isinstance(transcript, list):
        raise typer.BadParameter(f"Expected JSON array in {transcript_file}")
    details = _load_json(session_details_file)
    if not isinstance(details, dict):
        raise typer.BadParameter(f"Expected JSON object in {session_details_file}")

    synthesizer = ReportSynthesizer(LLMClient(settings.llm), config=settings.llm)

    async def _run() -> SynthesisResult:
        return await synthesizer.synthesize(transcript, details, session_id)

    try:
        result = asyncio.run(_run())
    except ConsultError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    payload = json.dumps(result.to_payload(), indent=2, ensure_ascii=False)
    if output:
        output.write_text(payload, encoding="utf-8")
        console.print(f"[green]Report saved to {output}[/green]")
    else:
        console.print_json(payload)

    meta = result.meta
    if meta.used_retry:
        console.print("[yellow]Model output needed a corrective retry[/yellow]")
    if meta.used_fallback_for_tests or meta.used_fallback_for_medications:
        console.print("[yellow]Demo fallback recommendations were applied[/yellow]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8080, help="Bind port"),
    reload: bool = typer.Option(False, "--reload"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("consult_ai.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
