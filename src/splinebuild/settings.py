"""Settings controlling how spline paths are materialized."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SplineSettings:
    """Settings for materializing and polygonizing spline paths.

    Attributes:
        polygonize_steps: Number of line pieces used per cubic segment when
            polygonizing a path without an explicit step count.
        close_path_command: If True, a closed curve is materialized with a
            trailing 'Z' command that draws the wrap back to the start point.
            Off by default: paths consist of move-to and cubic-to only.
    """

    polygonize_steps: int = 50
    close_path_command: bool = False

    def __post_init__(self) -> None:
        if self.polygonize_steps < 1:
            raise ValueError(f"polygonize_steps must be at least 1, got {self.polygonize_steps}")

    def to_dict(self) -> dict:
        """Convert settings to a dictionary."""
        return {
            "polygonize_steps": self.polygonize_steps,
            "close_path_command": self.close_path_command,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SplineSettings":
        """Create SplineSettings from a dictionary, falling back to defaults for missing keys."""
        return cls(
            polygonize_steps=data.get("polygonize_steps", 50),
            close_path_command=data.get("close_path_command", False),
        )


DEFAULT_SETTINGS = SplineSettings()
