#!/usr/bin/env python3
"""
Item extractor command line interface.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .batch import BatchCoordinator
from .config import ExtractionOptions
from .exceptions import ItemExtractorError
from .exporter import EXPORT_FORMATS, TABLE_COLUMNS, default_export_name, export_items, table_rows, write_export
from .extractor import ItemExtractor
from .models import ExtractedItem
from .translator import DescriptionTranslator, translate_descriptions

logger = logging.getLogger(__name__)

# Status output goes to stderr so exported data can be piped from stdout
console = Console(stderr=True)

PREVIEW_ROWS = 10


def load_options(config_path: Optional[str], overrides: Dict[str, Any]) -> ExtractionOptions:
    """Read an options file (JSON) and apply command line overrides on top."""
    data: Dict[str, Any] = {}
    if config_path:
        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise click.BadParameter(f"invalid JSON: {e}", param_hint="--config")
        if not isinstance(data, dict):
            raise click.BadParameter("options file must contain a JSON object", param_hint="--config")

    for key, value in overrides.items():
        if value is None or value == ():
            continue
        if key == 'custom_patterns':
            value = tuple(data.get('customPatterns', data.get('custom_patterns', ()))) + tuple(value)
            data.pop('customPatterns', None)
        data[key] = value

    return ExtractionOptions.from_mapping(data)


def show_preview(items: Sequence[ExtractedItem]):
    table = Table(title=f"Preview (showing first {min(len(items), PREVIEW_ROWS)} of {len(items)} items)")
    for column in TABLE_COLUMNS:
        table.add_column(column, justify="right" if column in ("Quantity", "Unit Price") else "left")
    for row in table_rows(items, limit=PREVIEW_ROWS):
        table.add_row(*(f"{row[c]:.2f}" if c == "Unit Price" else str(row[c]) for c in TABLE_COLUMNS))
    console.print(table)


def emit(items: Sequence[ExtractedItem], fmt: str, output: Optional[str]):
    if output or fmt == 'xlsx':
        path = write_export(items, fmt, output or default_export_name())
        console.print(f"[green]💾 Results saved to: {escape(str(path))}[/green]")
    else:
        click.echo(export_items(items, fmt))


def apply_translation(items: list, translate: bool) -> list:
    if not translate or not items:
        return items

    translator = DescriptionTranslator()
    with Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console) as progress:
        task = progress.add_task("Translating...", total=len(items))
        translate_descriptions(
            items,
            translator,
            progress=lambda done, total, message: progress.update(task, completed=done, description=message),
        )
        progress.update(task, completed=len(items))
    return items


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def cli(verbose: bool):
    """Extract stock code, description, quantity and unit price rows from PDFs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file path (default: print to console)')
@click.option('--format', '-f', 'fmt', type=click.Choice(EXPORT_FORMATS, case_sensitive=False),
              default='json', show_default=True, help='Export format')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON options file')
@click.option('--strict/--no-strict', default=None, help='Use strict validation')
@click.option('--max-pages', type=int, default=None, help='Read at most this many pages per PDF')
@click.option('--timeout-ms', type=int, default=None, help='Per-document timeout in milliseconds')
@click.option('--concurrency', type=int, default=None, help='Documents processed at the same time')
@click.option('--compare-field', 'compare_fields', multiple=True,
              help='Field used to detect duplicates (repeatable)')
@click.option('--case-sensitive/--ignore-case', default=None, help='Case-sensitive duplicate detection')
@click.option('--pattern', 'patterns', multiple=True, help='Additional regex with 4 groups (repeatable)')
@click.option('--translate', is_flag=True, help='Translate descriptions to Chinese')
@click.option('--preview/--no-preview', default=True, help='Show a preview table')
def extract(files, output, fmt, config_path, strict, max_pages, timeout_ms, concurrency,
            compare_fields, case_sensitive, patterns, translate, preview):
    """Extract line items from one or more PDF files."""
    fmt = fmt.lower()
    try:
        options = load_options(config_path, {
            'strict_mode': strict,
            'max_pages': max_pages,
            'timeout_ms': timeout_ms,
            'concurrency': concurrency,
            'compare_fields': compare_fields,
            'case_sensitive': case_sensitive,
            'custom_patterns': patterns,
        })

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"Processing {len(files)} file(s)...", total=len(files))

            def on_progress(completed: int, total: int, message: str):
                progress.update(task, completed=completed, description=message)

            result = BatchCoordinator(options, progress=on_progress).run(files)

        for error in result.errors:
            console.print(f"[red]❌ Error processing {escape(error['file'])}: {escape(error['error'])}[/red]")

        items = apply_translation(list(result.items), translate)

        if preview and items:
            show_preview(items)
        console.print(f"[{'green' if result.success else 'yellow'}]{result.status_message}[/]")

        if items:
            emit(items, fmt, output)
        elif not output and fmt != 'xlsx':
            click.echo(export_items(items, fmt))

    except ItemExtractorError as e:
        click.echo(f"Error extracting items: {e}", err=True)
        raise click.Abort()


@cli.command('parse-text')
@click.argument('text_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output file path')
@click.option('--format', '-f', 'fmt', type=click.Choice(EXPORT_FORMATS, case_sensitive=False),
              default='json', show_default=True, help='Export format')
@click.option('--strict/--no-strict', default=False, help='Use strict validation')
@click.option('--pattern', 'patterns', multiple=True, help='Additional regex with 4 groups (repeatable)')
def parse_text(text_file, output, fmt, strict, patterns):
    """Extract line items from an already extracted text file."""
    try:
        options = ExtractionOptions(strict_mode=strict, custom_patterns=patterns)
        text = Path(text_file).read_text(encoding='utf-8')
        items = [replace(item, source_file=Path(text_file).name)
                 for item in ItemExtractor(options).extract_items(text)]
        if not items:
            console.print("[yellow]Could not find any items matching the required format.[/yellow]")
            if not output and fmt.lower() != 'xlsx':
                click.echo(export_items(items, fmt))
            return
        emit(items, fmt.lower(), output)
    except ItemExtractorError as e:
        click.echo(f"Error extracting items: {e}", err=True)
        raise click.Abort()


def main():
    cli()


if __name__ == '__main__':
    main()
