"""Command-line interface for field extraction and document drafting.

Subcommands:

- ``extract``: Field Map JSON from a scanned document or a text file.
- ``placeholders``: list the placeholders in a template file.
- ``merge``: fill a template file from a JSON Field Map.
- ``generate``: scan documents and fill a library template, optionally
  exporting the result to PDF or DOCX.
"""

import argparse
import json
import sys
from pathlib import Path

from lexform.drafting.drafter import DocumentDrafter
from lexform.errors import LexFormError
from lexform.export.exporter import DocumentExporter
from lexform.extraction.field_extractor import FieldExtractor
from lexform.templating.placeholders import extract_placeholders, render
from lexform.utils.config import load_config
from lexform.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _write_output(text: str, output: Path | None) -> None:
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    print(f"Output written to {output}")


def _require_file(path: Path) -> None:
    if not path.is_file():
        print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)


def extract_command(file_path: Path, text_input: bool = False) -> dict[str, object]:
    """Extract fields from one document.

    Args:
        file_path: Image/PDF to OCR, or a UTF-8 text file if ``text_input``.
        text_input: Treat the file as already-recognized text.

    Returns:
        Dictionary with filename, fields and, for scans, OCR confidence.
    """
    if text_input:
        text = file_path.read_text(encoding="utf-8")
        return {
            "filename": file_path.name,
            "fields": FieldExtractor().extract(text),
        }

    drafter = DocumentDrafter(load_config())
    scan, fields = drafter.scan(file_path, file_path.name)
    return {
        "filename": file_path.name,
        "fields": fields,
        "confidence": round(scan.confidence, 3),
        "page_count": scan.page_count,
        "raw_text": scan.text,
    }


def merge_command(template_path: Path, data_path: Path) -> tuple[str, list[str]]:
    """Fill a template file from a JSON object of field values.

    Returns:
        The merged text and the identifiers left unresolved.
    """
    fields = json.loads(data_path.read_text(encoding="utf-8"))
    if not isinstance(fields, dict):
        raise ValueError(f"{data_path} must contain a JSON object")
    result = render(
        template_path.read_text(encoding="utf-8"),
        {str(k): str(v) for k, v in fields.items()},
    )
    return result.content, result.unresolved


def generate_command(
    files: list[Path],
    template_name: str,
    output: Path,
    fmt: str | None = None,
    signature: str | None = None,
) -> list[str]:
    """Draft a library template from scanned documents and save it.

    Args:
        files: Documents to scan, in order of precedence (later wins).
        template_name: Template name in the configured library.
        output: Destination file.
        fmt: ``pdf``/``docx`` to export, or ``None`` to write plain text.
        signature: Signature data; adds a signature block to exports.

    Returns:
        Placeholder identifiers left unresolved.
    """
    config = load_config()
    drafter = DocumentDrafter(config)
    draft = drafter.draft([(f.name, f) for f in files], template_name)

    output.parent.mkdir(parents=True, exist_ok=True)
    if fmt:
        exporter = DocumentExporter(config.export)
        output.write_bytes(
            exporter.export(
                draft.content, fmt, title=draft.template_name, signature=signature
            )
        )
    else:
        output.write_text(draft.content, encoding="utf-8")

    for scanned in draft.files:
        if scanned.error:
            print(f"Warning: {scanned.filename}: {scanned.error}", file=sys.stderr)
    print(f"Draft written to {output}")
    return draft.unresolved


def _report_unresolved(unresolved: list[str]) -> None:
    if unresolved:
        print(f"Unresolved placeholders: {', '.join(unresolved)}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="LexForm legal document automation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser(
        "extract", help="Extract fields from a document"
    )
    extract_parser.add_argument("file", type=Path, help="Image, PDF or text file")
    extract_parser.add_argument(
        "--text", action="store_true", help="Input is already-recognized text"
    )
    extract_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    placeholders_parser = subparsers.add_parser(
        "placeholders", help="List the placeholders in a template"
    )
    placeholders_parser.add_argument("template", type=Path, help="Template text file")

    merge_parser = subparsers.add_parser("merge", help="Fill a template file")
    merge_parser.add_argument("template", type=Path, help="Template text file")
    merge_parser.add_argument(
        "-d", "--data", type=Path, required=True, help="JSON file of field values"
    )
    merge_parser.add_argument("-o", "--output", type=Path, help="Output text file")

    generate_parser = subparsers.add_parser(
        "generate", help="Scan documents and fill a library template"
    )
    generate_parser.add_argument("files", type=Path, nargs="+", help="Documents")
    generate_parser.add_argument(
        "-t", "--template", required=True, help="Template name in the library"
    )
    generate_parser.add_argument(
        "-f", "--format", choices=["pdf", "docx"], help="Export format"
    )
    generate_parser.add_argument(
        "-o", "--output", type=Path, required=True, help="Output file"
    )
    generate_parser.add_argument("--signature", help="Signature data to attach")

    args = parser.parse_args(argv)

    setup_logging()

    try:
        if args.command == "extract":
            _require_file(args.file)
            result = extract_command(args.file, args.text)
            _write_output(json.dumps(result, indent=2, ensure_ascii=False), args.output)
        elif args.command == "placeholders":
            _require_file(args.template)
            for name in extract_placeholders(args.template.read_text(encoding="utf-8")):
                print(name)
        elif args.command == "merge":
            _require_file(args.template)
            _require_file(args.data)
            content, unresolved = merge_command(args.template, args.data)
            _write_output(content, args.output)
            _report_unresolved(unresolved)
        elif args.command == "generate":
            for path in args.files:
                _require_file(path)
            unresolved = generate_command(
                args.files, args.template, args.output, args.format, args.signature
            )
            _report_unresolved(unresolved)
        else:
            parser.print_help()
            sys.exit(0)
    except (LexFormError, ValueError) as exc:
        logger.error("Command failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
