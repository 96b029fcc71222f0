from __future__ import annotations

import argparse
import locale
import sys
from pathlib import Path

from dotenv import load_dotenv

from awb_batches.config.loader import ConfigError, ExtractConfig, resolve_config
from awb_batches.excel.reader import read_sheet_grid
from awb_batches.logging.error_log import ErrorLogBuffer
from awb_batches.logging.init import log_summary, setup_logging
from awb_batches.models.extraction_result import ExtractionResult
from awb_batches.services.errors import ExtractionError
from awb_batches.services.export import (
    default_csv_name,
    details_frame,
    groups_frame,
    identifiers_frame,
    write_csv,
)
from awb_batches.services.header_resolver import resolve_columns
from awb_batches.services.pipeline import check_file_type, load_grid, process_files
from awb_batches.services.style_classifier import build_classifier
from awb_batches.services.summary import render_summary_line

"""CLI entrypoint: python -m awb_batches.cli FILE [FILE ...]

- Load .env, then config (--config > $AWB_BATCHES_CONFIG > config/extract.yml > defaults)
- Process each workbook sequentially
- Print batch / AWB tables and a SUMMARY line per file, optionally write the CSV export
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env (values override the process environment)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _set_collation_locale(logger) -> None:
    # バッチ名の並び順をユーザーのロケールに合わせる
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.debug(f"locale collation unavailable, using code point order: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="awb-batches",
        description="Extract highlighted AWB rows from an .xlsx sheet and group them by batch",
    )
    p.add_argument("files", nargs="*", type=Path, help="Workbook(s) to process (.xlsx)")
    p.add_argument("--config", type=Path, default=None, help="YAML config path")
    p.add_argument(
        "--csv",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help="Write the batch summary as CSV (default name when PATH is omitted)",
    )
    p.add_argument("--details", action="store_true", help="Also print every highlighted row")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print header, resolved columns and style profile, then exit",
    )
    return p.parse_args(argv)


def _inspect_data(paths: list[Path], cfg: ExtractConfig) -> int:
    code = EXIT_SUCCESS_ALL
    for path in paths:
        print(f"FILE: {path.name}")
        try:
            check_file_type(path, cfg.allowed_extensions)
            grid = load_grid(path, cfg.sheet, read_sheet_grid)
            header = grid.header()
            print(f"  SHEET: {grid.name} rows={grid.n_rows} cols={grid.n_cols} merges={len(grid.merges)}")
            print(f"  header={header}")
            columns = resolve_columns(header, cfg.headers, cfg.quantity_fallback_index)
        except ExtractionError as e:
            print(f"  error={e}")
            code = EXIT_PARTIAL_FAILURE
            continue
        print(
            f"  columns identifier={columns.identifier} group_key={columns.group_key} "
            f"quantity={columns.quantity}"
        )
        styles = [
            grid.cell(r, columns.identifier).style
            for r in range(1, grid.n_rows)
            if not grid.cell(r, columns.identifier).value.is_empty
        ]
        profile = build_classifier(cfg.classifier, styles).profile()
        print(
            f"  styles strategy={profile.strategy} unstyled={profile.unstyled_cells} "
            f"styled={profile.styled_cells} distinct={profile.distinct_styles} "
            f"majority_count={profile.majority_count}"
        )
    return code


def _print_result(result: ExtractionResult, cfg: ExtractConfig, show_details: bool) -> None:
    if not result.ok:
        return
    print(f"== {result.file_name} [{result.sheet_name}]")
    if not result.groups:
        print("(no highlighted rows)")
        return
    sep = cfg.export.identifier_separator
    print(groups_frame(result, separator=sep).to_string(index=False))
    print()
    print(identifiers_frame(result).to_string(index=False))
    if show_details:
        print()
        print(details_frame(result).to_string(index=False))


def _csv_target(raw: str, result: ExtractionResult, multiple: bool) -> Path:
    stem = Path(result.file_name).stem if multiple else None
    if raw == "":
        return Path(default_csv_name(stem=stem))
    target = Path(raw)
    if multiple:
        target = target.with_name(f"{target.stem}_{Path(result.file_name).stem}{target.suffix}")
    return target


def main(argv: list[str] | None = None) -> int:
    # None のときのみシステム引数を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    _set_collation_locale(logger)

    try:
        cfg = resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.files:
        logger.error("no input files given")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(args.files, cfg)

    error_log = ErrorLogBuffer(Path(cfg.error_log_dir))
    results = process_files(args.files, cfg, error_log=error_log)

    multiple = len(results) > 1
    for result in results:
        _print_result(result, cfg, args.details)
        if result.ok and args.csv is not None:
            target = write_csv(result, _csv_target(args.csv, result, multiple), cfg.export)
            logger.info(f"csv written: {target}")
        log_summary(render_summary_line(result)[len("SUMMARY "):])

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    if any(not r.ok for r in results):
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
