#!filepath: demandcv/cli.py
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich import print
from rich.markup import escape
from rich.table import Table

from demandcv import Logging, __version__
from demandcv.config.app_config import AppConfig
from demandcv.utils.errors import CrossValidationError, UserInputError

app = typer.Typer(help="Polynomial degree selection with rolling-origin cross-validation")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def select(
        csv: Optional[str] = typer.Argument(None, help="prepared sales/weather CSV"),
        config: Optional[str] = typer.Option(None, help="YAML config (default: demandcv/config/base.yml)"),
        strategy: Optional[str] = typer.Option(None, help="rolling | random_kfold"),
        num_folds: Optional[int] = typer.Option(None, help="number of folds"),
        max_degree: Optional[int] = typer.Option(None, help="largest polynomial degree"),
        workers: Optional[int] = typer.Option(None, help="process pool size (1 = sequential)"),
        report: bool = typer.Option(True, help="write CSV reports"),
):
    """
    Run cross-validation over degrees 1..max_degree and pick one by the
    one-standard-error rule.
    """
    from demandcv.workflows.model_selection import build_model_selection, new_run_id

    overrides = {
        "strategy": strategy,
        "num_folds": num_folds,
        "max_degree": max_degree,
        "max_workers": workers,
    }

    try:
        cfg = _load_config(config, csv, overrides, report)
        Logging.from_config(cfg.log)
        ctx = build_model_selection(cfg).run(new_run_id())
    except UserInputError as e:
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)
    except CrossValidationError as e:
        print(f"[red]cross-validation aborted: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"{cfg.selection.strategy} CV, {len(ctx.folds)} folds")
    table.add_column("degree", justify="right")
    table.add_column("mean_rmse", justify="right")
    table.add_column("se_rmse", justify="right")
    for s in ctx.result.summaries:
        mark = " *" if s.degree == ctx.result.degree else ""
        table.add_row(f"{s.degree}{mark}", f"{s.mean_rmse:.4f}", f"{s.se_rmse:.4f}")
    print(table)

    print(
        f"[green]selected degree={ctx.result.degree}[/green] "
        f"(best={ctx.result.best_degree}, threshold={ctx.result.threshold:.4f})"
    )


def _load_config(config, csv, overrides, report) -> AppConfig:
    try:
        cfg = AppConfig.load(config)
        sel = cfg.selection.model_dump()
        sel.update({k: v for k, v in overrides.items() if v is not None})
        cfg = cfg.model_copy(
            update={
                "selection": type(cfg.selection)(**sel),
                "report": cfg.report.model_copy(update={"enabled": report}),
            }
        )
    except FileNotFoundError as e:
        raise UserInputError(str(e)) from e
    except ValidationError as e:
        raise UserInputError(f"invalid configuration:\n{e}") from e

    if csv is not None:
        # command-line paths are relative to the current directory
        csv = str(Path(csv).resolve())
        cfg = cfg.model_copy(update={"data": cfg.data.model_copy(update={"path": csv})})
    return cfg


if __name__ == "__main__":
    app()

# python -m demandcv.cli select data/sales_weather.csv
