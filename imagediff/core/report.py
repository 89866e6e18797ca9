"""Report builder: text and JSON output for imagediff results."""

import json
from typing import Any

from imagediff.core.types import DiffReport


def format_text(report: DiffReport) -> str:
    """One-line human-readable summary of the run."""
    prefix = 'Normalized ' if report.normalized else ''
    line = (
        f'{prefix}{report.mode_label} difference image successfully created '
        f'with scale factor {report.scale:.1f}: {report.output_path}'
    )
    if not report.normalized:
        line += f' ({report.diff_pct:.2f}% {report.counts.diff} differing pixels)'
    return line


def format_json(report: DiffReport) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'left': report.left_path,
        'right': report.right_path,
        'output': report.output_path,
        'dimensions': {'width': report.width, 'height': report.height},
        'mode': report.mode,
        'normalized': report.normalized,
        'scale': report.scale,
        'composite': report.composite,
        'chunks': report.chunks,
        'counts': {
            'left': report.counts.left,
            'right': report.counts.right,
            'diff': report.counts.diff,
        },
        'diff_pct': round(report.diff_pct, 2),
    }
    if report.stats:
        obj['stats'] = report.stats
    return json.dumps(obj, indent=2)
