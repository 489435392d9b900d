"""paste2typ CLI -- convert pasted tables and table files to Typst from the terminal.

Typst code goes to stdout (or ``--output``); summaries and errors go to
stderr so the code can be piped.
"""

import logging
from pathlib import Path

import click

from ._errors import TableConversionError
from ._types import DEFAULT_CONFIG, FormatType, TableConfig


def _read_input(text, file):
    if file:
        return Path(file).read_text(encoding="utf-8")
    if text:
        return text
    return click.get_text_stream("stdin").read()


def _table_options(func):
    """Conversion flags shared by ``convert`` and ``files``."""
    options = [
        click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
                     help="JSON file with conversion settings."),
        click.option("--three-line/--no-three-line", default=None,
                     help="Booktabs-style table with three horizontal rules."),
        click.option("--math/--no-math", default=None,
                     help="Typeset variable names and headers in math mode."),
        click.option("--borders/--no-borders", default=None,
                     help="Draw top and bottom table borders."),
        click.option("--superscript/--no-superscript", default=None,
                     help="Render significance stars as superscripts."),
        click.option("--alignment/--no-alignment", default=None,
                     help="Keep the source column alignment."),
        click.option("--divider-after-constant/--no-divider-after-constant", default=None,
                     help="Add a rule after the Constant row."),
        click.option("--output", "-o", default="", help="Write the Typst code to this file."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(config_file, three_line, math, borders, superscript, alignment,
                  divider_after_constant) -> TableConfig:
    base = TableConfig.from_file(config_file) if config_file else DEFAULT_CONFIG
    flags = {
        "three_line_table": three_line,
        "auto_math_mode": math,
        "preserve_borders": borders,
        "preserve_superscript": superscript,
        "preserve_alignment": alignment,
        "add_divider_after_constant": divider_after_constant,
    }
    return base.merged({key: value for key, value in flags.items() if value is not None})


def _emit(code, output, console):
    if output:
        Path(output).write_text(code + "\n", encoding="utf-8")
        console.print(f"Wrote Typst table to [bold]{output}[/bold]")
    else:
        click.echo(code)


@click.group()
@click.version_option(package_name="paste2typ-core")
@click.option("--verbose", "-v", is_flag=True, help="Log parsing and rendering details.")
def cli(verbose):
    """paste2typ -- Convert spreadsheet and document tables to Typst."""
    if verbose:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@cli.command()
@click.argument("text", required=False)
@click.option("--file", "-f", type=click.Path(exists=True, dir_okay=False), help="Read text from file.")
@click.option("--format", "format_name", default="auto",
              type=click.Choice(["auto", "csv", "rtf"]), help="Input format.")
@_table_options
def convert(text, file, format_name, config_file, three_line, math, borders, superscript,
            alignment, divider_after_constant, output):
    """Convert pasted CSV/TSV or RTF text into a Typst table."""
    from rich.console import Console
    from rich.markup import escape

    from .pipeline import convert_clipboard_text, convert_text

    console = Console(stderr=True)
    text = _read_input(text, file)

    if not text or not text.strip():
        console.print("[red]No input text provided.[/red]")
        raise SystemExit(1)

    config = _build_config(config_file, three_line, math, borders, superscript,
                           alignment, divider_after_constant)
    # auto_convert only gates paste handling, not explicit conversion
    config = config.merged({"auto_convert": True})

    try:
        if format_name == "auto":
            blocks = convert_clipboard_text(text, config)
        else:
            blocks = [convert_text(text, FormatType(format_name), config)]
    except TableConversionError as exc:
        console.print(f"[red]Error ({exc.code.value}): {escape(str(exc))}[/red]")
        raise SystemExit(1)

    blocks = [block for block in blocks if block]
    if not blocks:
        console.print("[yellow]No table found in input.[/yellow]")
        raise SystemExit(1)

    if len(blocks) > 1:
        console.print(f"Found [bold]{len(blocks)}[/bold] tables")
    _emit("\n\n".join(blocks), output, console)


@cli.command()
@click.argument("text", required=False)
@click.option("--file", "-f", type=click.Path(exists=True, dir_okay=False), help="Read text from file.")
def detect(text, file):
    """Report the format of pasted text."""
    from rich.console import Console

    from .ingestion import detect_format, extract_tables

    console = Console()
    text = _read_input(text, file)
    format = detect_format(text or "")

    if format != FormatType.UNKNOWN:
        console.print(f"Format: [bold green]{format.value}[/bold green]")
        return

    embedded = extract_tables(text or "")
    if embedded:
        console.print(
            f"Format: [bold yellow]{format.value}[/bold yellow]  |  "
            f"Embedded tables: {len(embedded)}"
        )
    else:
        console.print(f"Format: [bold red]{format.value}[/bold red]  |  No table found")


@cli.command()
@click.argument("text", required=False)
@click.option("--file", "-f", type=click.Path(exists=True, dir_okay=False), help="Read text from file.")
def extract(text, file):
    """List the tables embedded in mixed text."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    from .ingestion import extract_tables

    console = Console()
    tables = extract_tables(_read_input(text, file) or "")

    if not tables:
        console.print("[yellow]No tables found.[/yellow]")
        return

    table = Table(title=f"Extracted Tables ({len(tables)})")
    table.add_column("#", justify="right")
    table.add_column("Format", style="cyan")
    table.add_column("Lines", justify="right")
    table.add_column("Preview", style="dim")

    for index, extracted in enumerate(tables, start=1):
        lines = extracted.content.split("\n")
        preview = lines[0][:60]
        table.add_row(str(index), extracted.format.value, str(len(lines)), escape(preview))

    console.print(table)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def sheets(file):
    """List the worksheets of a workbook."""
    from rich.console import Console
    from rich.markup import escape

    from .ingestion import get_excel_sheet_names

    console = Console()

    try:
        names = get_excel_sheet_names(file)
    except TableConversionError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise SystemExit(1)

    for index, name in enumerate(names, start=1):
        console.print(f"{index}. {escape(name)}")


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--sheet", "-s", default=None, help="Worksheet to convert (default: first sheet).")
@click.option("--all-sheets", is_flag=True, help="Convert every worksheet as its own panel.")
@_table_options
def files(paths, sheet, all_sheets, config_file, three_line, math, borders, superscript,
          alignment, divider_after_constant, output):
    """Convert CSV and Excel files; several tables are combined as panels."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    from .pipeline import convert_files

    console = Console(stderr=True)
    config = _build_config(config_file, three_line, math, borders, superscript,
                           alignment, divider_after_constant)

    with console.status("Converting..."):
        batch = convert_files(paths, config, sheet_name=sheet, all_sheets=all_sheets)

    table = Table(title="Conversion Results")
    table.add_column("Table", style="cyan")
    table.add_column("Status")
    table.add_column("Size", justify="right")
    table.add_column("Detail", style="dim")

    for result in batch.results:
        if result.status.value == "ok":
            status = "[green]ok[/green]"
            size = f"{result.rows} x {result.columns}"
        else:
            style = "yellow" if result.status.value == "skipped" else "red"
            status = f"[{style}]{result.status.value}[/{style}]"
            size = "-"
        table.add_row(escape(result.label), status, size, escape(result.error_message or ""))

    console.print(table)

    if not batch.combined:
        console.print("[red]No tables could be converted.[/red]")
        raise SystemExit(1)

    _emit(batch.combined, output, console)


if __name__ == "__main__":
    cli()
