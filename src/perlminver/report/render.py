"""Plain-text rendering of batch reports."""

from __future__ import annotations

from perlminver.report.models import BatchReport, FileReport

_UNKNOWN = "unknown"
_NONE = "-"


def _cell(report: FileReport, value: str | None) -> str:
    if not report.ok:
        return _UNKNOWN
    return value if value is not None else _NONE


def render_table(batch: BatchReport, *, explain: bool = False) -> str:
    width = max([len("File")] + [len(r.path) for r in batch.files])
    lines = [f"{'File':<{width}}  {'Minimum':<9}{'Explicit':<10}{'Syntax':<9}"]
    for report in batch.files:
        row = (
            f"{report.path:<{width}}  {_cell(report, report.minimum):<9}"
            f"{_cell(report, report.explicit):<10}{_cell(report, report.syntax):<9}"
        )
        if report.inconsistent:
            row += "explicit version below syntax requirement"
        elif report.error:
            row += f"error: {report.error}"
        lines.append(row.rstrip())
        if explain:
            for marker in report.markers:
                lines.append(f"    {marker.version:<9}{', '.join(marker.rules)}")

    lines.append("")
    lines.append(f"Files checked: {len(batch.files)}")
    lines.append(f"Minimum version: {batch.minimum or _UNKNOWN}")
    if batch.inconsistent:
        lines.append(f"Inconsistent: {len(batch.inconsistent)}")
    if batch.errors:
        lines.append(f"Errors: {batch.errors}")
    return "\n".join(lines)
