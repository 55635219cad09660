"""Shared helpers for click-based `fftsearch` commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click
import numpy as np

from fftsearch.compute.spreading import as_spectrum
from fftsearch.config import SearchConfig

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_RUNTIME_ERROR = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class FftSearchCliError(click.ClickException):
    """Click exception with explicit exit-code control."""

    def __init__(self, message: str, *, exit_code: int = EXIT_INPUT_ERROR) -> None:
        super().__init__(message)
        self.exit_code = int(exit_code)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def dump_json_output(payload: dict[str, Any], out_path: Path | None) -> None:
    """Write JSON payload to file or stdout."""
    text = json.dumps(payload, sort_keys=True, indent=2)
    if out_path is None:
        click.echo(text)
        return
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text + "\n", encoding="utf-8")


def dump_text_output(text: str, out_path: Path | None) -> None:
    if out_path is None:
        click.echo(text, nl=False)
        return
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")


def load_json_file(path: Path, *, label: str) -> dict[str, Any]:
    """Load an object JSON file with user-facing errors."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FftSearchCliError(f"{label} not found: {path}") from exc
    except OSError as exc:
        raise FftSearchCliError(f"Cannot read {label}: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FftSearchCliError(f"Malformed JSON in {label}: {exc}") from exc

    if not isinstance(payload, dict):
        raise FftSearchCliError(f"{label} must be a JSON object")
    return payload


def load_spectrum_file(path: Path) -> np.ndarray:
    """Load a complex spectrum saved with `numpy.save`.

    Both 1-D complex arrays and (N, 2) real/imaginary pairs are accepted.
    """
    try:
        raw = np.load(path, allow_pickle=False)
    except FileNotFoundError as exc:
        raise FftSearchCliError(f"Spectrum file not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise FftSearchCliError(f"Cannot read spectrum from {path}: {exc}") from exc
    try:
        return as_spectrum(raw)
    except ValueError as exc:
        raise FftSearchCliError(f"Invalid spectrum in {path}: {exc}") from exc


def resolve_search_config(config_path: Path | None, **overrides: Any) -> SearchConfig:
    """Merge an optional JSON config file with command line overrides."""
    try:
        base = (
            SearchConfig.from_mapping(load_json_file(config_path, label="search config"))
            if config_path is not None
            else SearchConfig()
        )
        return base.with_overrides(**overrides)
    except (TypeError, ValueError) as exc:
        raise FftSearchCliError(f"Invalid search config: {exc}") from exc


def resolve_optional_output_path(output_arg: str | None) -> Path | None:
    """Map '-', empty, or None to stdout; otherwise return filesystem path."""
    if output_arg is None:
        return None
    value = str(output_arg).strip()
    if value in {"", "-"}:
        return None
    return Path(value)
