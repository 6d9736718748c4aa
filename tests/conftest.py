"""
Pytest configuration and shared fixtures for Merklet tests.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Generator, List, Optional

import pytest


def create_test_config_content(
    temp_dir: Path,
    algorithm: str = "sha256",
    backend: str = "hashlib",
    input_format: str = "lines",
    log_level: str = "WARNING",
    log_file: Optional[Path] = None,
) -> str:
    """
    Generate test configuration YAML content.

    Args:
        temp_dir: Temporary directory for the log file.
        algorithm: Hash algorithm name.
        backend: Hash backend name.
        input_format: Leaf file format.
        log_level: Logging level.
        log_file: Optional log file. If None, logs go to temp_dir/merklet.log.

    Returns:
        YAML configuration content as string.
    """
    if log_file is None:
        log_file = temp_dir / "merklet.log"

    return f"""
hashing:
  algorithm: {algorithm}
  backend: {backend}

input:
  format: {input_format}
  encoding: utf-8
  skip_blank: true

logging:
  level: {log_level}
  file: {log_file}
  format: json
"""


@pytest.fixture
def clean_logging() -> Generator[None, None, None]:
    """Drop root logging handlers installed by a test."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to sample config file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(create_test_config_content(temp_dir=temp_dir))
    return config_path


@pytest.fixture
def missing_config_path(temp_dir: Path) -> Path:
    """Path to a configuration file that does not exist."""
    return temp_dir / "missing" / "config.yaml"


@pytest.fixture
def make_leaf_file(temp_dir: Path):
    """
    Factory fixture that writes leaf values to a file, one per line.

    Usage:
        def test_something(make_leaf_file):
            path = make_leaf_file(["A", "B", "C"])
    """
    def _make_leaf_file(values: List[str], name: str = "leaves.txt") -> Path:
        path = temp_dir / name
        path.write_text("".join(f"{value}\n" for value in values), encoding="utf-8")
        return path
    return _make_leaf_file


@pytest.fixture
def abc_leaf_file(make_leaf_file) -> Path:
    """Leaf file holding A, B and C."""
    return make_leaf_file(["A", "B", "C"])


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

# Register custom profile for Merklet tests
settings.register_profile("merklet", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("merklet-ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("merklet-dev", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "merklet"))
