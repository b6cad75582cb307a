"""Import status report and JSON/CSV output."""

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

from ..core.model import ImportStatus, RemoteItem
from ..messages import PENDING, is_failure


class ImportReport:
    """Import status per remote item, always iterated in item order."""

    def __init__(self) -> None:
        self._statuses: dict[RemoteItem, ImportStatus] = {}

    def ensure(self, item: RemoteItem) -> ImportStatus:
        if item not in self._statuses:
            self._statuses[item] = ImportStatus(target=item, status=PENDING)
        return self._statuses[item]

    def set_status(self, item: RemoteItem, message: str) -> None:
        self.ensure(item).status = message

    def get(self, item: RemoteItem) -> ImportStatus | None:
        return self._statuses.get(item)

    def __contains__(self, item: object) -> bool:
        return item in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)

    def __iter__(self) -> Iterator[RemoteItem]:
        return iter(sorted(self._statuses))

    def items(self) -> list[tuple[RemoteItem, ImportStatus]]:
        return [(item, self._statuses[item]) for item in self]

    @property
    def succeeded(self) -> list[RemoteItem]:
        return [item for item, st in self.items() if not is_failure(st.status) and st.status != PENDING]

    @property
    def failed(self) -> list[RemoteItem]:
        return [item for item, st in self.items() if is_failure(st.status)]


def _report_rows(report: ImportReport) -> list[dict[str, Any]]:
    return [
        {
            "name": item.name,
            "full_name": item.full_name,
            "url": item.url,
            "folder": item.is_folder,
            "status": status.status,
            "missing_plugins": item.missing_plugins or {},
        }
        for item, status in report.items()
    ]


def save_report_json(report: ImportReport, output_path: Path) -> None:
    """Save import report to JSON file."""
    data = {
        "version": 1,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "items": _report_rows(report),
    }

    with output_path.open('w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def save_report_csv(report: ImportReport, output_path: Path) -> None:
    """Save import report to CSV file for human review."""
    with output_path.open('w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(["full_name", "url", "folder", "status", "missing_plugins"])

        for row in _report_rows(report):
            writer.writerow([
                row["full_name"],
                row["url"],
                "yes" if row["folder"] else "no",
                row["status"],
                "|".join(f"{name}@{version}" for name, version in row["missing_plugins"].items()),
            ])


def items_to_dicts(items: Iterable[RemoteItem]) -> list[dict[str, Any]]:
    return [
        {
            "name": item.name,
            "full_name": item.full_name,
            "url": item.url,
            "impl": item.impl,
            "description": item.description,
            "folder": item.is_folder,
            "parent": item.parent.full_name if item.parent is not None else None,
        }
        for item in sorted(items)
    ]


def save_items_json(items: Iterable[RemoteItem], output_path: Path) -> None:
    """Save discovered items to JSON file."""
    with output_path.open('w', encoding='utf-8') as f:
        json.dump(items_to_dicts(items), f, indent=2, ensure_ascii=False)
