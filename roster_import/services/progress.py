from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

- Row scanning gets a single tqdm bar (disabled when stdout is not a TTY, so
  CI logs and piped output stay free of control sequences)
- Run stages get a one-line indicator printed as each stage completes
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
    "StageIndicator",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over a known number of items (rows).

    In non-TTY environments the tracker is inert.
    """

    def __init__(
        self,
        total: int,
        *,
        description: str = "Scanning rows",
        unit: str = "row",
        enabled: bool = True,
    ) -> None:
        """Initialize progress tracker.

        Args:
            total: Total number of items to process
            description: Description for the progress bar
            unit: Unit label shown by tqdm
            enabled: Caller switch; the bar also needs a TTY
        """
        self.total = total
        self.description = description
        self.current = 0

        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit=unit,
                disable=False,
                leave=False,
                position=0,
                ncols=80,  # Standard width for consistency
                ascii=True,  # ASCII chars for better compatibility
            )
        else:
            self.pbar = None

    def advance(self, n: int = 1) -> None:
        self.current += n
        if self.enabled and self.pbar is not None:
            self.pbar.update(n)

    def set_postfix(self, **kwargs: Any) -> None:
        """Set postfix information (stats) on the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class StageIndicator:
    """Prints the import stages as they complete (TTY only).

    Stages are short, so a full bar per stage is not worth it.
    """

    def __init__(self, source_label: str) -> None:
        self.source_label = source_label
        self.current_stage: str | None = None
        self.enabled = is_tty_enabled()

    def start_stage(self, stage: str) -> None:
        self.current_stage = stage
        if self.enabled:
            print(f"  {stage}...", end="", flush=True)

    def finish_stage(self, success: bool = True, detail: str = "") -> None:
        if self.enabled and self.current_stage is not None:
            status = "✓" if success else "✗"
            if detail:
                print(f" {detail} {status}")
            else:
                print(f" {status}")
        self.current_stage = None
