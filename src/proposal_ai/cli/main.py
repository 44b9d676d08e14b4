"""CLI for proposal-ai: generate / templates / slides / status / validate-config / check-prompts / preview-slide."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from proposal_ai.core.config import AppSettings, LLMConfig, ObservabilityConfig, TemplatesConfig
from proposal_ai.core.logging_config import setup_logging
from proposal_ai.core.startup_checks import validate_settings
from proposal_ai.exceptions import ConfigurationError, SlideGenerationError, TemplateSelectionError
from proposal_ai.formatters.json_formatter import JSONFormatter
from proposal_ai.models import IntakeData
from proposal_ai.providers.litellm_provider import LiteLLMTextProvider
from proposal_ai.providers.protocols import ITextProvider
from proposal_ai.services.proposal_service import ProposalService
from proposal_ai.slides.store import ConfigStore, read_config_document

app = typer.Typer(name="proposal-ai", help="Configuration-driven proposal deck generator")
console = Console()


def _build_settings(
    templates_dir: Optional[Path] = None,
    model: Optional[str] = None,
    verbose: bool = False,
) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    settings = AppSettings()
    updates: dict = {}
    if templates_dir:
        updates["templates"] = TemplatesConfig(templates_dir=templates_dir)
    if model:
        updates["llm"] = LLMConfig(model=model)
    if verbose:
        updates["observability"] = ObservabilityConfig(log_level="DEBUG")
    if updates:
        settings = settings.model_copy(update=updates)
    setup_logging(settings.observability)
    return settings


def _build_provider(settings: AppSettings) -> ITextProvider:
    return LiteLLMTextProvider(settings.llm)


def _build_service(settings: AppSettings, *, needs_provider: bool = False) -> ProposalService:
    if needs_provider:
        try:
            validate_settings(settings)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(1) from exc
    return ProposalService(settings, _build_provider(settings))


def _load_intake(path: Path) -> IntakeData:
    try:
        return IntakeData.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid intake data in {path}: {exc}") from exc


def _print_progress(title: str, index: int, total: int) -> None:
    console.print(f"  [{index}/{total}] {title}")


@app.command()
def generate(
    intake_file: Path = typer.Argument(..., help="JSON file with client intake data"),
    attachment: Optional[list[Path]] = typer.Option(
        None, "--attachment", "-a", help="Supporting document (repeatable)"
    ),
    template_id: Optional[str] = typer.Option(None, "--template-id", help="Force a template"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Where to write the deck"),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also write the result as JSON"),
    templates_dir: Optional[Path] = typer.Option(None, "--templates-dir"),
    model: Optional[str] = typer.Option(None, "--model", help="LLM model name"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate a proposal deck from intake data."""
    settings = _build_settings(templates_dir, model, verbose)
    service = _build_service(settings, needs_provider=True)
    intake = _load_intake(intake_file)

    console.print(f"[bold]Generating proposal for {intake.company_name}[/bold]")
    try:
        result = asyncio.run(
            service.generate_deck(
                intake,
                attachments=attachment or [],
                template_id=template_id,
                output_dir=output_dir,
                progress=_print_progress,
            )
        )
    except TemplateSelectionError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    finally:
        service.close()

    table = Table(title=f"Proposal ({result.template.name})")
    table.add_column("Slide", style="cyan")
    table.add_column("Confidence", justify="right")
    table.add_column("Warnings", max_width=60)
    for slide in result.proposal.slides:
        style = "red" if slide.failed else "green"
        table.add_row(
            slide.title,
            f"[{style}]{slide.confidence}%[/{style}]",
            "; ".join(slide.warnings),
        )
    console.print(table)
    console.print(f"Overall confidence: [bold]{result.proposal.overall_confidence}%[/bold]")

    if json_out:
        JSONFormatter().format_to_file(result.proposal, json_out)
        console.print(f"[green]Result saved to {json_out}[/green]")

    if result.document.is_fallback:
        console.print(f"[yellow]Template unavailable, text summary written to {result.document.path}[/yellow]")
    else:
        console.print(f"[green]Presentation saved to {result.document.path}[/green]")


@app.command()
def templates(
    templates_dir: Optional[Path] = typer.Option(None, "--templates-dir"),
) -> None:
    """List registered templates."""
    settings = _build_settings(templates_dir)
    service = _build_service(settings)

    table = Table(title="Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Industries")
    table.add_column("Project Types")
    table.add_column("Template File")
    for descriptor in service.list_templates():
        table.add_row(
            descriptor.id,
            descriptor.name,
            ", ".join(sorted(descriptor.industries)),
            ", ".join(sorted(descriptor.project_types)),
            descriptor.template_path.name if descriptor.template_path.is_file() else "[yellow]missing[/yellow]",
        )
    console.print(table)


@app.command()
def slides(
    template_id: Optional[str] = typer.Option(None, "--template-id"),
    templates_dir: Optional[Path] = typer.Option(None, "--templates-dir"),
) -> None:
    """List enabled slides of a template."""
    settings = _build_settings(templates_dir)
    service = _build_service(settings)
    try:
        info = service.configuration_status(template_id)
        enabled = service.list_slides(template_id)
    except TemplateSelectionError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    console.print(
        f"[bold]{info['template_name']}[/bold] v{info['version']} "
        f"({info['enabled_slides']}/{info['total_slides']} slides enabled, model {info['model']})"
    )
    if info["is_fallback"]:
        console.print("[yellow]Configuration failed to load; using the empty fallback[/yellow]")

    table = Table(title="Slides")
    table.add_column("Order", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Content Placeholder")
    for slide in enabled:
        table.add_row(str(slide.order), slide.id, slide.title, slide.placeholder_mapping.content)
    console.print(table)


@app.command()
def status(
    template_id: Optional[str] = typer.Option(None, "--template-id"),
    reload: bool = typer.Option(False, "--reload", help="Re-read the configuration file first"),
    templates_dir: Optional[Path] = typer.Option(None, "--templates-dir"),
) -> None:
    """Show the active slide configuration of a template."""
    settings = _build_settings(templates_dir)
    service = _build_service(settings)
    try:
        if reload and not service.reload(template_id):
            console.print("[yellow]Reload failed; previous configuration kept[/yellow]")
        info = service.configuration_status(template_id)
    except TemplateSelectionError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    table = Table(title=f"Configuration: {info['template_name']}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Template ID", info["template_id"])
    table.add_row("Path", info["path"])
    table.add_row("Version", str(info["version"]))
    table.add_row("Author", info["author"])
    table.add_row("Slides", f"{info['enabled_slides']}/{info['total_slides']} enabled")
    table.add_row("Model", str(info["model"]))
    table.add_row("Risky terms", str(info["compliance"]["risky_terms"]))
    table.add_row("Qualifying terms", str(info["compliance"]["qualifying_terms"]))
    table.add_row("Fallback", "yes" if info["is_fallback"] else "no")
    console.print(table)


@app.command("validate-config")
def validate_config(
    config_file: Path = typer.Argument(..., help="YAML or JSON slide configuration"),
) -> None:
    """Validate a slide configuration document."""
    try:
        data = read_config_document(config_file)
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    valid, error = ConfigStore.validate_document(data)
    if not valid:
        console.print(f"[red]Invalid configuration:[/red] {error}")
        raise typer.Exit(1)
    console.print(f"[green]{config_file} is valid ({len(data.get('slides') or [])} slides)[/green]")


@app.command("check-prompts")
def check_prompts(
    template_id: Optional[str] = typer.Option(None, "--template-id"),
    intake_file: Optional[Path] = typer.Option(None, "--intake", help="Intake JSON to check against"),
    templates_dir: Optional[Path] = typer.Option(None, "--templates-dir"),
) -> None:
    """Report prompt variables that do not resolve against intake data."""
    settings = _build_settings(templates_dir)
    service = _build_service(settings)
    intake = _load_intake(intake_file) if intake_file else None
    try:
        report = service.check_prompts(template_id, intake)
    except TemplateSelectionError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if not report:
        console.print("[green]All prompt variables resolve[/green]")
        return
    for slide_id, missing in report.items():
        console.print(f"[yellow]{slide_id}[/yellow]: {', '.join(missing)}")
    raise typer.Exit(1)


@app.command("preview-slide")
def preview_slide(
    slide_id: str = typer.Argument(..., help="Slide id to generate"),
    intake_file: Path = typer.Argument(..., help="JSON file with client intake data"),
    template_id: Optional[str] = typer.Option(None, "--template-id"),
    templates_dir: Optional[Path] = typer.Option(None, "--templates-dir"),
    model: Optional[str] = typer.Option(None, "--model", help="LLM model name"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate a single slide and print it."""
    settings = _build_settings(templates_dir, model, verbose)
    service = _build_service(settings, needs_provider=True)
    intake = _load_intake(intake_file)

    try:
        result = asyncio.run(service.preview_slide(slide_id, intake, template_id=template_id))
    except (ConfigurationError, SlideGenerationError, TemplateSelectionError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    console.print(f"\n[bold]{result.title}[/bold] (confidence {result.confidence}%)\n")
    console.print(result.content)
    for warning in result.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")


if __name__ == "__main__":
    app()
