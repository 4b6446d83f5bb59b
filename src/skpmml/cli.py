"""Command-line interface for the skpmml compiler."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from skpmml.compiler import CompilationResult
    from skpmml.config.settings import CompilerConfig

app = typer.Typer(
    name="skpmml",
    help="Compile fitted transformer and rule-set model attributes into scoring documents.",
    no_args_is_help=True,
)

# documents may go to stdout; everything else goes to stderr
console = Console(stderr=True)

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Path to pipeline configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]


def _load(config: Path, log_level: str | None) -> "CompilerConfig":
    from skpmml.config.loader import load_config
    from skpmml.utils.logging import configure_logging

    try:
        compiler_config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    configure_logging(
        level=log_level or compiler_config.logging.level,
        json_output=compiler_config.logging.json_output,
    )
    return compiler_config


def _compile(compiler_config: "CompilerConfig") -> "CompilationResult":
    from skpmml.compiler import Compiler
    from skpmml.exceptions import CompilationError

    compiler = Compiler(
        compiler_config.pipeline,
        project=compiler_config.project,
        description=compiler_config.description,
    )
    try:
        return compiler.compile()
    except CompilationError as e:
        console.print(f"[red]Compilation failed ({type(e).__name__}): {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command(name="compile")
def compile_command(
    config: ConfigOption,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output document path. Overrides output.path; stdout if neither is set.",
        ),
    ] = None,
    fmt: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Document format: 'json' or 'yaml'. Overrides output.format.",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override the configured log level."),
    ] = None,
) -> None:
    """Compile a pipeline configuration into a scoring document."""
    from skpmml.document.export import dump_document, write_document

    if fmt is not None and fmt not in ("json", "yaml"):
        console.print(f"[red]Error: Invalid format '{fmt}'. Use 'json' or 'yaml'.[/red]")
        raise typer.Exit(code=1)

    console.print(f"[blue]Loading configuration from {config}[/blue]")
    compiler_config = _load(config, log_level)
    result = _compile(compiler_config)

    out_format = fmt or compiler_config.output.format
    out_path = output or compiler_config.output.path
    indent = compiler_config.output.indent

    if out_path is None:
        typer.echo(dump_document(result.document, fmt=out_format, indent=indent))
        return

    write_document(result.document, out_path, fmt=out_format, indent=indent)

    table = Table(title=f"Compiled {compiler_config.project}")
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Data fields", str(len(result.document.data_dictionary)))
    table.add_row("Derived fields", str(len(result.document.transformation_dictionary)))
    table.add_row("Predictor features", str(len(result.schema.features)))
    table.add_row("Rules", str(len(result.document.model.rule_set.rules)))
    console.print(table)
    console.print(f"\n[green]Saved to: {out_path}[/green]")


@app.command()
def inspect(
    config: ConfigOption,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override the configured log level."),
    ] = None,
) -> None:
    """Show the features the model sees after the transformer chain."""
    compiler_config = _load(config, log_level)
    result = _compile(compiler_config)

    table = Table(title=f"Schema of {compiler_config.project}")
    table.add_column("#", style="dim")
    table.add_column("Feature", style="cyan")
    table.add_column("Kind")
    table.add_column("Op type")
    table.add_column("Data type")
    table.add_column("Values", style="green")

    for i, feature in enumerate(result.schema.features):
        table.add_row(
            str(i),
            feature.name,
            type(feature).__name__,
            feature.op_type.value,
            feature.data_type.value,
            ", ".join(feature.values),
        )
    console.print(table)

    label = result.schema.label
    console.print(f"[blue]Label:[/blue] {label.name} ({label.data_type.value})")

    rule_set = result.document.model.rule_set
    console.print(f"[blue]Rules:[/blue] {len(rule_set.rules)} (first hit)")
    if rule_set.default_score is None:
        console.print("[yellow]No default score: unmatched records have no prediction[/yellow]")
    else:
        console.print(f"[blue]Default score:[/blue] {rule_set.default_score}")


if __name__ == "__main__":
    app()
