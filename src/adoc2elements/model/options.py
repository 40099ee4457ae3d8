"""Transform options for adoc2elements processing.

Defaults reproduce the behavior expected of the chapter importer: captions
lose their "Figure N." numbering and malformed nodes are skipped so that a
chapter always gets partial content rather than nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MalformedPolicy(Enum):
    """What to do with a node that is missing an expected child."""

    SKIP = "skip"  # Log a warning and continue with the next sibling (default)
    RAISE = "raise"  # Abort the chapter with MalformedNodeError


@dataclass
class TransformOptions:
    """Configuration for the chapter transformer."""

    # Caption numbering label stripped from image titles ("Figure 1. ...")
    figure_label: str = "Figure"

    # Handling of malformed nodes (default: SKIP)
    on_malformed: MalformedPolicy = MalformedPolicy.SKIP

    @classmethod
    def from_cli(
        cls,
        *,
        figure_label: str = "Figure",
        on_malformed: str = "skip",
    ) -> TransformOptions:
        """Build TransformOptions from CLI argument values.

        Args:
            figure_label: Caption label to strip ("Figure", "Abbildung", ...)
            on_malformed: Malformed node policy ("skip", "raise")

        Returns:
            TransformOptions instance with mapped enum values

        Raises:
            ValueError: If any argument has an invalid value
        """
        try:
            policy = MalformedPolicy(on_malformed)
        except ValueError as exc:
            valid_values = [p.value for p in MalformedPolicy]
            raise ValueError(
                f"Invalid malformed policy '{on_malformed}'. Valid values: {valid_values}"
            ) from exc

        label = figure_label.strip()
        if not label:
            raise ValueError("Figure label cannot be empty")

        return cls(figure_label=label, on_malformed=policy)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        return {
            "figure_label": self.figure_label,
            "on_malformed": self.on_malformed.value,
        }

    def __repr__(self) -> str:
        return (
            f"TransformOptions("
            f"figure_label={self.figure_label!r}, "
            f"on_malformed={self.on_malformed.value}"
            f")"
        )


__all__ = [
    "MalformedPolicy",
    "TransformOptions",
]
