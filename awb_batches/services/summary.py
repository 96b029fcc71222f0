from __future__ import annotations

from ..models.extraction_result import ExtractionResult

"""SUMMARY line rendering.

Format:
SUMMARY file={name} status={ok|failed} rows={data_rows} highlighted={details}
groups={groups} identifiers={identifiers} repeated={repeated} total_quantity={quantity}
"""


def render_summary_line(result: ExtractionResult) -> str:
    """Render the SUMMARY line for one run.

    Examples:
        >>> from awb_batches.models.extraction_result import ExtractionResult
        >>> render_summary_line(ExtractionResult.failed("a.xlsx", "", "MISSING_COLUMN", "x"))
        'SUMMARY file=a.xlsx status=failed rows=0 highlighted=0 groups=0 identifiers=0 repeated=0 total_quantity=0'
    """
    status = "ok" if result.ok else "failed"
    return (
        f"SUMMARY file={result.file_name} "
        f"status={status} "
        f"rows={result.data_rows} "
        f"highlighted={len(result.details)} "
        f"groups={len(result.groups)} "
        f"identifiers={len(result.identifier_stats)} "
        f"repeated={len(result.repeated_identifiers)} "
        f"total_quantity={result.total_quantity}"
    )
