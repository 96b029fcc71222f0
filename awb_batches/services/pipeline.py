from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..config.loader import ExtractConfig
from ..excel.reader import read_sheet_grid
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import FILE_LEVEL_ROW, ErrorRecord
from ..models.extraction_result import ExtractionResult, RunStatus
from ..models.sheet_grid import SheetGrid
from .aggregator import summarize_groups, summarize_identifiers
from .errors import (
    ExtractionError,
    ProcessingFailure,
    SessionBusyError,
    UnsupportedFileTypeError,
)
from .header_resolver import resolve_columns
from .progress import ProgressTracker
from .row_extractor import extract_rows
from .style_classifier import build_classifier

logger = logging.getLogger(__name__)

"""Run orchestration for the highlighted batch extractor.

run_pipeline() is the error boundary: it checks the file type, loads the worksheet, runs the
core (header resolution → style classification → row extraction → aggregation) and converts
every failure into a FAILED ExtractionResult with empty outputs. The core itself
(extract_from_grid) is a pure function of the grid and the config.
"""

GridLoader = Callable[[Path, str | None], SheetGrid]


@dataclass(frozen=True)
class RunContext:
    """Everything a single run needs; nothing survives the run."""
    path: Path
    config: ExtractConfig


def check_file_type(path: Path, allowed_extensions: Sequence[str]) -> None:
    """Reject files whose extension is not accepted, before they are opened."""
    suffix = path.suffix.lower()
    if suffix not in allowed_extensions:
        raise UnsupportedFileTypeError(
            f"unsupported file type '{suffix or path.name}': expected {', '.join(allowed_extensions)}"
        )


def extract_from_grid(grid: SheetGrid, config: ExtractConfig, file_name: str = "") -> ExtractionResult:
    """Run the core pipeline over an already loaded grid.

    Raises:
        MissingColumnError: identifier and/or group key column not found
    """
    columns = resolve_columns(grid.header(), config.headers, config.quantity_fallback_index)
    logger.debug(
        f"columns identifier={columns.identifier} group_key={columns.group_key} "
        f"quantity={columns.quantity}"
    )

    id_cells = (grid.cell(r, columns.identifier) for r in range(1, grid.n_rows))
    styles = [c.style for c in id_cells if not c.value.is_empty]
    classifier = build_classifier(config.classifier, styles)
    profile = classifier.profile()
    logger.debug(
        f"styles strategy={profile.strategy} unstyled={profile.unstyled_cells} "
        f"styled={profile.styled_cells} distinct={profile.distinct_styles} "
        f"majority_count={profile.majority_count}"
    )

    details = extract_rows(grid, columns, classifier, preview_limit=config.preview_limit)
    groups = summarize_groups(details)
    identifier_stats = summarize_identifiers(details)
    logger.info(f"found {len(details)} highlighted row(s) in {len(groups)} batch(es)")

    return ExtractionResult(
        file_name=file_name,
        sheet_name=grid.name,
        status=RunStatus.SUCCESS,
        data_rows=grid.data_row_count,
        columns=columns,
        style_profile=profile,
        details=tuple(details),
        groups=tuple(groups),
        identifier_stats=tuple(identifier_stats),
    )


def load_grid(path: Path, sheet_name: str | None, loader: GridLoader = read_sheet_grid) -> SheetGrid:
    """Load the worksheet, wrapping any parser failure in ProcessingFailure."""
    try:
        return loader(path, sheet_name)
    except Exception as e:
        raise ProcessingFailure(str(e) or type(e).__name__) from e


def run_pipeline(
    ctx: RunContext,
    error_log: ErrorLogBuffer | None = None,
    loader: GridLoader = read_sheet_grid,
) -> ExtractionResult:
    """Process one workbook. Never raises; failures come back as FAILED results."""
    file_name = ctx.path.name
    sheet_name = ctx.config.sheet or ""
    logger.info(f"processing {file_name}")
    try:
        check_file_type(ctx.path, ctx.config.allowed_extensions)
        grid = load_grid(ctx.path, ctx.config.sheet, loader)
        sheet_name = grid.name
        try:
            return extract_from_grid(grid, ctx.config, file_name=file_name)
        except ExtractionError:
            raise
        except Exception as e:
            raise ProcessingFailure(str(e) or type(e).__name__) from e
    except ExtractionError as e:
        message = str(e)
        logger.error(f"{file_name}: {message}")
        if error_log is not None:
            error_log.append(
                ErrorRecord.create(
                    file=file_name,
                    sheet=sheet_name,
                    row=FILE_LEVEL_ROW,
                    error_type=e.error_type,
                    message=message,
                )
            )
        return ExtractionResult.failed(file_name, sheet_name, e.error_type, message)


def process_files(
    paths: Sequence[Path],
    config: ExtractConfig,
    error_log: ErrorLogBuffer | None = None,
) -> list[ExtractionResult]:
    """Process workbooks sequentially, one complete run per file."""
    results: list[ExtractionResult] = []
    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            result = run_pipeline(RunContext(path=path, config=config), error_log=error_log)
            results.append(result)
            progress.set_postfix(
                ok=sum(1 for r in results if r.ok),
                failed=sum(1 for r in results if not r.ok),
            )
            progress.finish_file(success=result.ok)
    return results


class ExtractionSession:
    """Holds the transient state of an interactive caller.

    `processing` gates re-entrant calls while a run is active; `last_result` is replaced on
    every run, so a new upload discards everything from the previous one.
    """

    def __init__(self, config: ExtractConfig, error_log: ErrorLogBuffer | None = None) -> None:
        self.config = config
        self.error_log = error_log
        self.processing = False
        self.last_result: ExtractionResult | None = None

    @property
    def error(self) -> str | None:
        if self.last_result is None:
            return None
        return self.last_result.error

    def process(self, path: Path, loader: GridLoader = read_sheet_grid) -> ExtractionResult:
        if self.processing:
            raise SessionBusyError("processing already in progress")
        self.processing = True
        self.last_result = None
        try:
            result = run_pipeline(
                RunContext(path=path, config=self.config), error_log=self.error_log, loader=loader
            )
        finally:
            self.processing = False
        self.last_result = result
        return result
