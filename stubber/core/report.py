"""Run reporting: console summary and JSON artifact."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
from pathlib import Path
from typing import Any, Dict, List

from rich.table import Table

from .context import console


@dataclass
class StubReport:
    stubbed: List[str] = field(default_factory=list)
    # final function index of each stub, parallel to ``stubbed``
    stub_indices: List[int] = field(default_factory=list)
    kept_count: int = 0
    translations: Dict[int, int] = field(default_factory=dict)
    swaps: int = 0
    patched_calls: int = 0
    unpatched_references: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # JSON object keys must be strings
        data["translations"] = {str(k): v for k, v in sorted(self.translations.items())}
        return data


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def print_report(report: StubReport) -> None:  # noqa: D401
    """Render *report* as a table on the console."""

    table = Table(title="Stubbed imports", show_lines=False)
    table.add_column("import")
    table.add_column("new index", justify="right")

    for name, index in zip(report.stubbed, report.stub_indices):
        table.add_row(name, str(index))
    console.print(table)

    console.print(
        f"[bold]kept[/bold]={report.kept_count} stubbed={len(report.stubbed)} "
        f"swaps={report.swaps} patched_calls={report.patched_calls}"
    )
    for reference in report.unpatched_references:
        console.print(f"[yellow]warning: unpatched reference: {reference}")


def write_report(path: Path, report: StubReport) -> None:  # noqa: D401
    """Write *report* to *path* as JSON."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_dict(), indent=2))


__all__ = ["StubReport", "print_report", "write_report"]
