"""
Command-line interface for pdfforge.
"""

import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from pdfforge import __version__
from pdfforge.annotate import AnnotationConfig, WatermarkConfig, add_header_footer, add_watermark
from pdfforge.annotate.layout import WatermarkPosition
from pdfforge.compress import CompressionLevel, compress_document, estimate_compression
from pdfforge.config import Settings
from pdfforge.exceptions import InputInvalidError, PdfForgeError
from pdfforge.merge import merge_documents
from pdfforge.split import SplitPolicy, split_document
from pdfforge.types import MergeInput
from pdfforge.utils import configure_logging, format_file_size

console = Console()


def _fail(error: Exception) -> None:
    if isinstance(error, PdfForgeError):
        console.print(f"\n[bold red]✗ {error.classification}:[/bold red] {error.detail}")
        if error.retryable:
            console.print("[dim]This error is retryable.[/dim]")
    else:
        console.print(f"\n[bold red]✗ Error:[/bold red] {error}")
    sys.exit(1)


def _read(path: str) -> bytes:
    return Path(path).read_bytes()


def _write(path: str, data: bytes) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)


def _parse_ranges(value: str) -> list:
    ranges = []
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        start, _, end = token.partition("-")
        ranges.append({"start": start, "end": end or start})
    return ranges


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose):
    """
    pdfforge CLI - Annotate, watermark, split, merge and compress PDF files.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="annotate")
@click.argument("input_pdf", type=click.Path(exists=True))
@click.option("--output", "-o", required=True, type=click.Path(), help="Output PDF path")
@click.option("--left-header", default="", help="Text at the top left")
@click.option("--middle-header", default="", help="Text at the top centre")
@click.option("--right-header", default="", help="Text at the top right")
@click.option("--left-footer", default="", help="Text at the bottom left")
@click.option("--middle-footer", default="", help="Text at the bottom centre")
@click.option("--right-footer", default="", help="Text at the bottom right")
@click.option("--start-page", default=1, type=int, help="First page to annotate (1-indexed)")
@click.option("--cover-with-white", is_flag=True, help="White out the header and footer bands first")
@click.option("--text-color", default="#000000", help="Hex colour of the text")
@click.option("--font-size", default=10.0, type=float, help="Font size in points")
def annotate_command(input_pdf, output, left_header, middle_header, right_header,
                     left_footer, middle_footer, right_footer, start_page,
                     cover_with_white, text_color, font_size):
    """
    Add header and footer text to a PDF.

    Placeholders: "Page (x) of (y)", "(x) of (y)", "Page (x)", "(x)", "(file)".

    Example:

        pdfforge annotate report.pdf -o out.pdf --right-header "Page (x) of (y)"
    """
    try:
        settings = Settings.from_env()
        config = AnnotationConfig.from_mapping(
            {
                "leftHeader": left_header,
                "middleHeader": middle_header,
                "rightHeader": right_header,
                "leftFooter": left_footer,
                "middleFooter": middle_footer,
                "rightFooter": right_footer,
                "startPage": start_page,
                "coverWithWhite": cover_with_white,
                "textColor": text_color,
                "fontSize": font_size,
            },
            clamp=settings.clamp_out_of_range,
        )
        data = add_header_footer(_read(input_pdf), config)
        _write(output, data)
        console.print(f"\n[bold green]✓ Annotated PDF written to {output}[/bold green]")
    except Exception as e:
        _fail(e)


@cli.command(name="watermark")
@click.argument("input_pdf", type=click.Path(exists=True))
@click.option("--output", "-o", required=True, type=click.Path(), help="Output PDF path")
@click.option("--text", "-t", default="CONFIDENTIAL", help="Watermark text")
@click.option("--font-size", default=48.0, type=float, help="Font size (12-100)")
@click.option("--opacity", default=0.3, type=float, help="Opacity (0.0-1.0)")
@click.option("--color", default="#808080", help="Hex colour")
@click.option("--rotation", default=45.0, type=float, help="Rotation in degrees (-90 to 90)")
@click.option(
    "--position",
    default=WatermarkPosition.CENTER.value,
    type=click.Choice([position.value for position in WatermarkPosition]),
    help="Anchor position",
)
@click.option("--start-page", default=1, type=int, help="First page (1-indexed)")
@click.option("--end-page", default=0, type=int, help="Last page, 0 for the last page of the document")
def watermark_command(input_pdf, output, text, font_size, opacity, color, rotation,
                      position, start_page, end_page):
    """
    Stamp a text watermark on a range of pages.

    Example:

        pdfforge watermark contract.pdf -o marked.pdf -t DRAFT --position top-right
    """
    try:
        settings = Settings.from_env()
        config = WatermarkConfig.from_mapping(
            {
                "text": text,
                "fontSize": font_size,
                "opacity": opacity,
                "color": color,
                "rotation": rotation,
                "position": position,
                "startPage": start_page,
                "endPage": end_page,
            },
            clamp=settings.clamp_out_of_range,
        )
        data = add_watermark(_read(input_pdf), config)
        _write(output, data)
        console.print(f"\n[bold green]✓ Watermarked PDF written to {output}[/bold green]")
    except Exception as e:
        _fail(e)


@cli.command(name="split")
@click.argument("input_pdf", type=click.Path(exists=True))
@click.option("--output-dir", "-o", default="./output", type=click.Path(), help="Output directory")
@click.option("--pages", "pages", default=None, help="Comma separated page numbers, e.g. 1,3,5")
@click.option("--ranges", "ranges", default=None, help="Comma separated ranges, e.g. 1-5,6-10")
@click.option("--every", "every", default=None, type=int, help="Split every N pages")
@click.option("--name", "base_name", default=None, help="Base name for output files")
def split_command(input_pdf, output_dir, pages, ranges, every, base_name):
    """
    Split a PDF by pages, ranges or fixed-size chunks.

    Examples:

        pdfforge split book.pdf --ranges 1-5,6-10

        pdfforge split book.pdf --every 2 -o chunks
    """
    try:
        chosen = [option for option in (pages, ranges, every) if option is not None]
        if len(chosen) != 1:
            raise InputInvalidError("Choose exactly one of --pages, --ranges or --every.")

        if pages is not None:
            payload = {"splitType": "pages", "pages": pages}
        elif ranges is not None:
            payload = {"splitType": "ranges", "ranges": _parse_ranges(ranges)}
        else:
            payload = {"splitType": "every", "everyNPages": every}

        outputs = split_document(
            _read(input_pdf),
            SplitPolicy.from_mapping(payload),
            base_name=base_name or Path(input_pdf).stem,
        )

        table = Table(title="Split Output")
        table.add_column("File", style="cyan")
        table.add_column("Pages", style="green")
        table.add_column("Size", style="magenta")
        for item in outputs:
            _write(os.path.join(output_dir, item.filename), item.data)
            table.add_row(item.filename, item.label, format_file_size(len(item.data)))

        console.print()
        console.print(table)
        console.print(f"\n[bold green]✓ Created {len(outputs)} files[/bold green]")
        console.print(f"[dim]Output directory: {os.path.abspath(output_dir)}[/dim]")
    except Exception as e:
        _fail(e)


@cli.command(name="merge")
@click.argument("input_pdfs", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--output", "-o", default="merged.pdf", type=click.Path(), help="Output PDF path")
@click.option("--bookmarks", is_flag=True, help="Add one bookmark per input document")
def merge_command(input_pdfs, output, bookmarks):
    """
    Merge PDFs in the given order.

    Example:

        pdfforge merge a.pdf b.pdf c.pdf -o merged.pdf --bookmarks
    """
    try:
        inputs = [MergeInput(_read(path), Path(path).stem) for path in input_pdfs]
        result = merge_documents(
            inputs,
            output_filename=os.path.basename(output),
            add_bookmarks=bookmarks,
        )
        _write(output, result.data)

        table = Table(title="Merge Result", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Output", output)
        table.add_row("Pages", str(result.total_pages))
        table.add_row("Size", format_file_size(result.size))
        table.add_row("Bookmarks", str(result.bookmarks_added))
        table.add_row("Skipped pages", str(len(result.skipped_pages)))
        console.print()
        console.print(table)

        for warning in result.warnings:
            console.print(f"[yellow]! {warning}[/yellow]")
    except Exception as e:
        _fail(e)


@cli.command(name="compress")
@click.argument("input_pdf", type=click.Path(exists=True))
@click.option("--output", "-o", required=True, type=click.Path(), help="Output PDF path")
@click.option(
    "--level",
    "-l",
    default=CompressionLevel.MEDIUM.value,
    type=click.Choice([level.value for level in CompressionLevel]),
    help="Compression tier",
)
@click.option("--remove-metadata", is_flag=True, help="Strip document metadata")
@click.option("--target-kb", default=None, type=float, help="Desired maximum size in KB")
def compress_command(input_pdf, output, level, remove_metadata, target_kb):
    """
    Compress a PDF, keeping the smallest structurally valid result.

    Example:

        pdfforge compress scan.pdf -o small.pdf --level high
    """
    try:
        result = compress_document(
            _read(input_pdf),
            level,
            remove_metadata=remove_metadata,
            target_size_kb=target_kb,
        )
        _write(output, result.data)

        table = Table(title="Compression Result", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Original", format_file_size(result.original_size))
        table.add_row("Compressed", format_file_size(result.compressed_size))
        table.add_row("Reduction", f"{result.reduction_percent:.2f}%")
        table.add_row("Level", result.applied_level)
        table.add_row("Profile", result.profile)
        if result.target_met is not None:
            table.add_row("Target met", "Yes" if result.target_met else "No")
        console.print()
        console.print(table)
    except Exception as e:
        _fail(e)


@cli.command(name="estimate")
@click.argument("input_pdf", type=click.Path(exists=True))
def estimate_command(input_pdf):
    """
    Show projected savings for each compression tier.
    """
    try:
        estimate = estimate_compression(_read(input_pdf))

        table = Table(title=f"Compression Estimate: {os.path.basename(input_pdf)}")
        table.add_column("Level", style="cyan", no_wrap=True)
        table.add_column("Reduction", style="green")
        table.add_column("Estimated size", style="magenta")
        table.add_column("Description")
        for tier in estimate.tiers:
            table.add_row(
                tier.level,
                f"{tier.min_reduction:.0f}-{tier.max_reduction:.0f}%",
                format_file_size(tier.estimated_size),
                tier.description,
            )
        console.print()
        console.print(table)
        if estimate.page_count is not None:
            console.print(f"[dim]{estimate.page_count} pages, {format_file_size(estimate.original_size)}[/dim]")
    except Exception as e:
        _fail(e)


def main():
    cli()


if __name__ == "__main__":
    main()
