"""Typer CLI entrypoint for the interview gate."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pydantic
import typer

from .config import ConfigManager
from .container import InterviewContainer, create_container
from .errors import InterviewGateError
from .logging import configure_logging
from .schemas.config import AppConfig

app = typer.Typer(help="Interview verification gate and job matching CLI.")


def _build_container(config: Optional[Path]) -> InterviewContainer:
    settings = AppConfig()
    if config:
        if config.suffix != ".yaml":
            raise typer.BadParameter("Config file must use the .yaml extension", param_name="config")
        manager, name = ConfigManager.from_file(config)
        try:
            settings = manager.load_app_config(name)
        except pydantic.ValidationError as exc:
            raise typer.BadParameter(f"Invalid config: {exc.errors()[0]['msg']}", param_name="config") from exc
    return create_container(settings=settings)


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc


def _emit(payload: Any, output: Optional[Path]) -> None:
    rendered = json.dumps(payload, ensure_ascii=False, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(rendered, encoding="utf-8")
    else:
        typer.echo(rendered)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(5000, help="Bind port."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    jobs: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Jobs CSV loaded at startup."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from .api import create_app

    configure_logging(log_level)
    container = _build_container(config)
    if jobs:
        container.job_catalog().load(jobs)
    uvicorn.run(create_app(container), host=host, port=port, log_level=log_level.lower())


@app.command()
def analyze(
    resume: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Resume JSON path."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write analysis JSON here."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Extract skills, experience tier and roles from a resume."""
    configure_logging(log_level)
    container = create_container(use_environment=False)
    try:
        analysis = container.skill_extractor().extract(_read_json(resume))
    except InterviewGateError as exc:
        typer.echo(f"error: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    _emit(analysis.to_payload(), output)


@app.command()
def match(
    jobs: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Jobs CSV path."),
    skills: str = typer.Option(..., help="Comma-separated candidate skills."),
    verification: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, help="Verification result JSON path."
    ),
    top_k: int = typer.Option(5, min=1, help="Number of jobs to return."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write match JSON here."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Rank catalog jobs for a candidate with a stored verification verdict."""
    configure_logging(log_level)
    container = create_container(use_environment=False)
    workflow = container.workflow()
    candidate_skills = [skill.strip() for skill in skills.split(",") if skill.strip()]
    try:
        workflow.load_catalog(jobs)
        outcome = workflow.match_jobs(
            candidate_skills,
            verification=_read_json(verification),
            top_k=top_k,
        )
    except InterviewGateError as exc:
        typer.echo(f"error: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    _emit(outcome.to_dict(), output)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
