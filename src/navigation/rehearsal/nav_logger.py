# nav_logger.py
# Handles all file I/O for the rehearsal system.
# Saves decision points and playback events as JSON, reports as CSV.

import json
import os
import logging
from datetime import datetime
from typing import List, Mapping, Optional, Sequence

from .diagnostics import report_frame
from .models import DecisionPoint, PlaybackState
from .nav_config import RehearsalConfig

# Standard Python logger, configure at app entry point if needed
logger = logging.getLogger(__name__)


class RehearsalLogger:
    """
    Persists analysis output and playback telemetry.

    Args:
        config: RehearsalConfig instance for file paths and directories.
    """

    def __init__(self, config: Optional[RehearsalConfig] = None) -> None:
        self.config = config or RehearsalConfig()
        os.makedirs(self.config.log_dir, exist_ok=True)

    # ------------------------------------------------------------------
    # Decision point persistence
    # ------------------------------------------------------------------

    def save_decision_points(self, points: Sequence[DecisionPoint]) -> bool:
        """
        Serialize decision points to JSON.

        Returns:
            True on success, False on failure.
        """
        filepath = self.config.points_filepath
        try:
            data = {
                "saved_at": datetime.now().isoformat(),
                "point_count": len(points),
                "points": [p.to_dict() for p in points],
            }
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            logger.info(f"Decision points saved to {filepath} ({len(points)} points).")
            return True
        except OSError as e:
            logger.error(f"Failed to save decision points to {filepath}: {e}")
            return False

    def load_decision_points(self, filepath: Optional[str] = None) -> Optional[List[DecisionPoint]]:
        """
        Load previously saved decision points.

        Args:
            filepath: Path override; uses config default if omitted.

        Returns:
            List of DecisionPoint objects, or None if loading failed.
        """
        path = filepath or self.config.points_filepath
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            points = [DecisionPoint.from_dict(p) for p in data["points"]]
            logger.info(f"Decision points loaded from {path} ({len(points)} points).")
            return points
        except (OSError, KeyError, ValueError) as e:
            logger.error(f"Failed to load decision points from {path}: {e}")
            return None

    # ------------------------------------------------------------------
    # Session event logging
    # ------------------------------------------------------------------

    def log_playback_event(self, state: PlaybackState) -> None:
        """Append one playback state snapshot to the session log."""
        entry = {"timestamp": datetime.now().isoformat(), **state.to_dict()}
        try:
            with open(self.config.session_filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            logger.error(f"Failed to write playback event: {e}")

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def export_report_csv(
        self,
        points: Sequence[DecisionPoint],
        dwell_seconds: Optional[Mapping[int, float]] = None,
        filepath: Optional[str] = None,
    ) -> bool:
        """Write the per-point debug report as CSV."""
        path = filepath or os.path.join(self.config.log_dir, "rehearsal_report.csv")
        try:
            report_frame(points, dwell_seconds).to_csv(path, index=False)
            logger.info(f"Report written to {path}.")
            return True
        except OSError as e:
            logger.error(f"Failed to write report to {path}: {e}")
            return False
