#!/usr/bin/env python3
"""Batch-convert SP1 and CSV point files.

Examples:
  sp1_convert.py survey.sp1 --to geojson
  sp1_convert.py 'data/*.sp1' --to csv --out-dir out/
  sp1_convert.py points.csv --to sp1 --survey "North Block" --datum ED50
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from glob import glob
from typing import List, Optional

# Make converter-backend importable when run from a checkout
THIS_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.abspath(os.path.join(THIS_DIR, "..", "converter-backend"))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from app.config import load_settings  # type: ignore
from app.conversions import ConversionResult, csv_to_sp1, default_csv_header, sp1_to_csv, sp1_to_geojson  # type: ignore
from app.logging_setup import configure_logging  # type: ignore
from sp1.errors import ConversionError  # type: ignore

logger = logging.getLogger("sp1_convert")


def _collect_files(patterns: List[str]) -> List[str]:
    files: List[str] = []
    for p in patterns:
        matches = glob(p)
        files.extend(matches if matches else [p])
    # keep first occurrence order, drop duplicates
    return list(dict.fromkeys(files))


def _output_path(src: str, res: ConversionResult, out_dir: Optional[str]) -> str:
    base_dir = out_dir or os.path.dirname(os.path.abspath(src))
    if res.filename.startswith("converted."):
        # Name after the input so batch runs don't overwrite each other
        stem = os.path.splitext(os.path.basename(src))[0]
        name = stem + os.path.splitext(res.filename)[1]
    else:
        name = res.filename
    return os.path.join(base_dir, name)


def convert_file(src: str, target: str, args: argparse.Namespace) -> ConversionResult:
    with open(src, "r", encoding="utf-8-sig", errors="replace") as f:
        content = f.read()
    name = os.path.basename(src)
    if target == "geojson":
        return sp1_to_geojson(content, strict=args.strict, source_name=name)
    if target == "csv":
        return sp1_to_csv(content, strict=args.strict, source_name=name)
    header = default_csv_header(
        version=args.version, survey=args.survey, datum=args.datum, projection=args.projection
    )
    return csv_to_sp1(content, source_name=name, header=header, strict=args.strict)


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()
    ap = argparse.ArgumentParser(description="Convert SP1 <-> GeoJSON/CSV point files")
    ap.add_argument("inputs", nargs="+", help="Input files or glob patterns")
    ap.add_argument("--to", dest="target", choices=["geojson", "csv", "sp1"], required=True)
    ap.add_argument("--out-dir", default=None, help="Directory for outputs (default: next to input)")
    ap.add_argument("--strict", action="store_true", default=settings.strict_coordinates,
                    help="Fail on unparsable coordinates instead of writing NaN")
    ap.add_argument("--version", default=settings.csv_version, help="SP1 Version header (CSV input)")
    ap.add_argument("--survey", default=settings.csv_survey, help="SP1 Survey header (CSV input)")
    ap.add_argument("--datum", default=settings.csv_datum, help="SP1 Datum header (CSV input)")
    ap.add_argument("--projection", default=None, help="SP1 Projection header (CSV input)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    files = _collect_files(args.inputs)
    if args.out_dir:
        os.makedirs(args.out_dir, exist_ok=True)

    failures = 0
    for src in files:
        try:
            res = convert_file(src, args.target, args)
        except FileNotFoundError:
            print(f"{src}: not found", file=sys.stderr)
            failures += 1
            continue
        except ConversionError as e:
            print(f"{src}: {e}", file=sys.stderr)
            failures += 1
            continue
        dst = _output_path(src, res, args.out_dir)
        with open(dst, "w", encoding="utf-8") as f:
            f.write(res.as_text())
        print(f"{src} -> {dst} ({res.point_count} points, {res.mime_type})")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
