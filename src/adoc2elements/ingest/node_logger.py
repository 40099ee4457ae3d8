"""Centralized decision logging for the chapter transformer.

This module keeps the transformer's skip/continue decisions in one place so
that they read the same way across the chapter and book pipelines. It is
meant for debugging markup problems, not for user-facing progress output.
"""

from __future__ import annotations

import logging

from adoc2elements.ingest.error_handling import ErrorContext, MalformedNodeError
from adoc2elements.model.content import ChapterResult
from adoc2elements.model.options import MalformedPolicy, TransformOptions

logger = logging.getLogger(__name__)


def log_transform_options(options: TransformOptions) -> None:
    """Log the transform configuration for debugging.

    Args:
        options: Transform options to log
    """
    logger.debug("Transform configuration:")
    logger.debug("  Figure label: %s", options.figure_label)
    logger.debug("  Malformed nodes: %s", options.on_malformed.value)


def log_node_skipped(context: ErrorContext, description: str) -> None:
    """Log an unrecognized node that produced no element.

    Args:
        context: Where the node was found
        description: Short description of the node (tag and classes)
    """
    logger.debug(
        "Chapter %s: skipping unrecognized node #%s (%s)",
        context.chapter_id,
        context.node_index,
        description,
        extra=context.to_dict(),
    )


def log_malformed_node(
    context: ErrorContext, error: MalformedNodeError, policy: MalformedPolicy
) -> None:
    """Log the error policy applied to a malformed node.

    Args:
        context: Where the node was found
        error: The error raised by the node handler
        policy: Policy deciding whether the chapter continues
    """
    action = "skip" if policy is MalformedPolicy.SKIP else "raise"
    logger.warning(
        "%s node #%s error policy: malformed -> %s (%s)",
        error.kind,
        context.node_index,
        action,
        error,
        extra=context.to_dict(),
    )


def log_chapter_summary(result: ChapterResult) -> None:
    """Log how many elements and images a chapter produced."""
    logger.info(
        "Chapter %s: %d elements, %d images",
        result.chapter_id,
        len(result.elements),
        len(result.images),
    )


__all__ = [
    "log_chapter_summary",
    "log_malformed_node",
    "log_node_skipped",
    "log_transform_options",
]
