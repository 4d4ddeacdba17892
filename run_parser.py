#!/usr/bin/env python3
"""
CLI script to run the schema parser over HTML files.

Two output formats:
  json  (default) → one record per file: {"file", "status", "data" | "error"}
  table           → each document written back out with the rendered tables
                    (or the error message) appended in the parser's container

Options not given on the command line fall back to the SCHEMA_PARSER_*
environment variables, which may also come from a .env file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from schema_parser.main import SchemaParser
from schema_parser.schemas import ParserConfig
from schema_parser.exceptions import SchemaParserError
from schema_parser.logger import setup_logger


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract microdata schemas from HTML files")
    parser.add_argument("files", nargs="+", help="HTML files to process")
    parser.add_argument("--schema", "-s", dest="schema_name", help="itemtype suffix to scan for (default: Product)")
    parser.add_argument("--format", "-f", choices=["json", "table"], default="json", help="Output format")
    parser.add_argument("--container-id", help="id of the generated container div")
    parser.add_argument("--class-namespace", help="Prefix for generated CSS classes")
    parser.add_argument("--output", "-o", help="Output file (json) or directory (table)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def run_json(args, config: ParserConfig) -> str:
    results = []

    for filepath in args.files:
        path = Path(filepath)
        try:
            schema_parser = SchemaParser.from_file(path, config=config)
        except (OSError, SchemaParserError) as e:
            results.append({"file": path.name, "status": "error", "error": str(e)})
            print(f"  ✗ {path.name}: {e}", file=sys.stderr)
            continue

        schema_parser.parse()
        if schema_parser.is_error:
            results.append({
                "file": path.name,
                "status": "error",
                "error": schema_parser.error.to_response()
            })
            print(f"  ✗ {path.name}: {schema_parser.error}", file=sys.stderr)
        else:
            results.append({"file": path.name, "status": "success", "data": schema_parser.to_data()})
            print(f"  ✓ {path.name}: {len(schema_parser.parsed_data)} item(s)", file=sys.stderr)

    # ensure_ascii=False keeps non-ASCII product text readable
    return json.dumps(results, indent=2, ensure_ascii=False)


def run_table(args, config: ParserConfig) -> list[tuple[Path, str]]:
    pages = []

    for filepath in args.files:
        path = Path(filepath)
        try:
            schema_parser = SchemaParser.from_file(path, config=config)
        except (OSError, SchemaParserError) as e:
            print(f"  ✗ {path.name}: {e}", file=sys.stderr)
            continue

        # Renders the error span instead of tables when parsing fails
        schema_parser.render_table()
        status = "✗" if schema_parser.is_error else "✓"
        print(f"  {status} {path.name}", file=sys.stderr)
        pages.append((path, str(schema_parser.document)))

    return pages


def main(argv=None) -> int:
    load_dotenv()
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)

    setup_logger(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = ParserConfig.from_env(
            schema_name=args.schema_name,
            container_id=args.container_id,
            class_namespace=args.class_namespace,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        arg_parser.error(f"invalid option value for: {fields}")

    if args.format == "json":
        output = run_json(args, config)
        if args.output:
            Path(args.output).write_text(output, encoding="utf-8")
            print(f"\nSaved to: {args.output}", file=sys.stderr)
        else:
            print(output)
        return 0

    pages = run_table(args, config)
    if args.output:
        out_dir = Path(args.output)
        out_dir.mkdir(parents=True, exist_ok=True)
        for path, html in pages:
            target = out_dir / f"{path.stem}.{config.schema_name.lower()}.html"
            target.write_text(html, encoding="utf-8")
            print(f"Saved to: {target}", file=sys.stderr)
    else:
        for _, html in pages:
            print(html)
    return 0


if __name__ == "__main__":
    sys.exit(main())
