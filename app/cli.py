from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adapters.filesystem.graph_repository import FileSystemGraphRepository
from adapters.filesystem.plan_repository import FileSystemPlanRepository
from adapters.layout.baseline import BaselineLayoutEngine
from app.config import AppSettings, load_settings
from domain.models import GraphDocument, LayoutPlan

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log layout steps at DEBUG level."),
) -> None:
    ctx.obj = {"verbose": verbose}


def _configure_logging(settings: AppSettings, verbose: bool) -> None:
    level = logging.DEBUG if verbose else settings.layout.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_documents(input_path: Path) -> List[tuple[Path, GraphDocument]]:
    repo = FileSystemGraphRepository()
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        if input_path.is_dir():
            return repo.load_all_with_paths(input_path)
        return [(input_path, repo.load_by_path(input_path))]
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid graph document:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _build_engine(ctx: typer.Context, config_path: Path | None) -> BaselineLayoutEngine:
    try:
        settings = load_settings(config_path)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc
    _configure_logging(settings, bool((ctx.obj or {}).get("verbose")))
    return BaselineLayoutEngine(settings.layout.to_engine_config())


@app.command("arrange")
def arrange(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Graph JSON file or directory of graph files."),
    output_dir: Path = typer.Option(
        Path("data/plans"), "--output", "-o", help="Directory to write layout plan files.",
    ),
    config_path: Path | None = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    engine = _build_engine(ctx, config_path)
    pairs = _load_documents(input_path)
    if not pairs:
        console.print(f"[yellow]No graph files found in {input_path}[/]")
        raise typer.Exit(code=0)

    plan_repo = FileSystemPlanRepository()
    for path, document in pairs:
        plan = engine.build_plan(document)
        target_path = output_dir / f"{path.stem}.plan.json"
        plan_repo.save(plan, target_path)
        logger.info("Arranged %s into %d layers", document.graph_id, len(plan.layers))
        console.print(f"[green]Wrote[/] {target_path}")


def _spacing_table(plan: LayoutPlan) -> Table:
    table = Table(title=f"{plan.graph_id} (height {plan.height:g})")
    table.add_column("Rank", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Nodes")
    table.add_column("Sibling gaps")
    for layer in plan.layers:
        gaps = ", ".join(
            f"{gap.left_id}->{gap.right_id}: {gap.distance:g}" for gap in layer.sibling_gaps
        )
        table.add_row(str(layer.rank), f"{layer.y:g}", " ".join(layer.node_ids), gaps or "-")
    return table


@app.command("spacing")
def spacing(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Graph JSON file or directory of graph files."),
    config_path: Path | None = typer.Option(None, "--config", help="YAML settings file."),
) -> None:
    engine = _build_engine(ctx, config_path)
    for _, document in _load_documents(input_path):
        console.print(_spacing_table(engine.build_plan(document)))


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Graph JSON file to validate.")) -> None:
    for path, document in _load_documents(input_path):
        console.print(
            f"[green]Valid graph document:[/] {path} "
            f"({len(document.nodes)} nodes, {len(document.ranks())} ranks)"
        )


if __name__ == "__main__":
    app()
