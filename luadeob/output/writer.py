"""ResultWriter — writes cleaned source and technique reports to disk."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import yaml

from luadeob.config.models import OutputConfig
from luadeob.models import TransformResult

logger = logging.getLogger(__name__)


class ResultWriter:
    """Writes TransformResult text to disk.

    A destination that is an existing directory gets ``config.filename``
    inside it. Parent directories are created as needed.
    """

    def __init__(self, config: OutputConfig) -> None:
        self.config = config

    def resolve(self, dest: str | Path) -> Path:
        path = Path(dest)
        if path.is_dir():
            return path / self.config.filename
        return path

    def write(self, result: TransformResult, dest: str | Path, *, dry_run: bool = False) -> Path:
        """Write the result text. Returns the Path of the written (or would-be) file."""
        path = self.resolve(dest)

        if dry_run:
            logger.debug("dry-run: would write %s", path)
            return path

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result.text, encoding="utf-8")
        logger.info("wrote %s (%d chars)", path, len(result.text))
        return path

    def write_report(
        self,
        result: TransformResult,
        dest: str | Path,
        *,
        source_file: str | None = None,
    ) -> Path:
        """Write a YAML report of the applied techniques next to ``dest``."""
        path = self.resolve(dest)
        report_path = path.with_name(path.name + self.config.report_suffix)
        report = {
            "source_file": source_file,
            "techniques": result.techniques,
            "counts": result.technique_counts(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(
            yaml.safe_dump(report, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        logger.info("wrote report %s", report_path)
        return report_path
