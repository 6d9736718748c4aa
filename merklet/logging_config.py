"""
Logging configuration for Merklet.

Structured logging through structlog on top of the stdlib logging module.
Log files get one JSON object per line; interactive runs get the console
renderer on stderr so stdout stays free for command output. Every event
emitted during one CLI invocation carries that invocation's run ID.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from structlog.types import EventDict, Processor


run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def add_run_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor that stamps the current run ID, when one is bound."""
    run_id = run_id_var.get()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def bind_run_id(run_id: Optional[str] = None) -> str:
    """
    Bind a run ID to the current context.

    Args:
        run_id: ID to bind; a fresh UUID4 when omitted

    Returns:
        The bound run ID
    """
    run_id = run_id or str(uuid.uuid4())
    run_id_var.set(run_id)
    return run_id


def _make_handler(log_file: Optional[Path], numeric_level: int) -> logging.Handler:
    if log_file is None:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    else:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file)
    handler.setLevel(numeric_level)
    # structlog has already rendered the event into the message
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for Merklet.

    Replaces any handlers already installed on the root logger, so calling
    it again (as the CLI does once the configuration is loaded) reconfigures
    rather than duplicates output.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: File to append to. If None, logs go to stderr.
        json_format: Render JSON lines instead of the console format
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_make_handler(log_file, numeric_level))

    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_run_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_file is None))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger namespaced under ``merklet.``."""
    if not name.startswith("merklet"):
        name = f"merklet.{name}"
    return structlog.get_logger(name)


def log_merkle_root_computation(
    logger: structlog.stdlib.BoundLogger,
    leaf_count: int,
    depth: int,
    merkle_root: str,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a finished tree build at debug level.

    Args:
        logger: Logger instance
        leaf_count: Number of leaves in the tree
        depth: Number of levels in the tree, leaves included
        merkle_root: Root digest, hex encoded
        duration_ms: Build time in milliseconds
        **kwargs: Extra fields, e.g. hash_algorithm
    """
    fields: Dict[str, Any] = dict(
        event_type="merkle_root_computation",
        leaf_count=leaf_count,
        depth=depth,
        merkle_root=merkle_root,
        duration_ms=duration_ms,
        **kwargs,
    )
    logger.debug("merkle_root_computation", **fields)


def log_merkle_verification(
    logger: structlog.stdlib.BoundLogger,
    leaf_index: int,
    success: bool,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log the outcome of a proof verification.

    Successes are logged at debug and failures at warning, so a passing
    interactive ``merklet verify`` prints nothing beyond its result line.

    Args:
        logger: Logger instance
        leaf_index: Leaf index the proof claims
        success: Whether the proof verified
        failure_reason: Short machine-readable reason for a failure
        **kwargs: Extra fields
    """
    fields: Dict[str, Any] = dict(
        event_type="merkle_verification",
        leaf_index=leaf_index,
        success=success,
        **kwargs,
    )

    if success:
        logger.debug("merkle_verification", **fields)
    else:
        logger.warning("merkle_verification_failed", failure_reason=failure_reason, **fields)
