from __future__ import annotations

import json
from pathlib import Path

import numpy as np
from click.testing import CliRunner

from fftsearch.catalogs.pulsars import KnownPulsar, save_catalog
from fftsearch.cli.common_cli import EXIT_INPUT_ERROR, EXIT_RUNTIME_ERROR
from fftsearch.cli.main import main
from tests.fixtures.spectra import make_minifft, make_real_spectrum


def _save(path: Path, array: np.ndarray) -> Path:
    np.save(path, array)
    return path


def test_search_success_payload(rng: np.random.Generator, tmp_path: Path) -> None:
    spec, norm = make_real_spectrum(rng, 512, {100.0: 0.5})
    spec_path = _save(tmp_path / "spec.npy", spec)
    out_path = tmp_path / "out" / "search.json"

    result = CliRunner().invoke(
        main,
        [
            "search",
            str(spec_path),
            "--norm",
            str(norm),
            "--numcands",
            "4",
            "--numharmsum",
            "2",
            "--out",
            str(out_path),
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["schema_version"] == "cli.search.v1"
    assert payload["options"]["numcands"] == 4
    assert payload["options"]["numharmsum"] == 2
    assert payload["options"]["interp"] == "INTERBIN"
    assert payload["inputs_summary"]["num_bins"] == 512
    cands = payload["result"]["candidates"]
    assert len(cands) == 4
    assert abs(cands[0]["r"] - 100.0) <= 0.5 or abs(cands[0]["r"] - 200.0) <= 0.5
    assert cands[0]["numsum"] == 2


def test_search_config_file_with_flag_override(rng: np.random.Generator, tmp_path: Path) -> None:
    spec, norm = make_real_spectrum(rng, 256)
    spec_path = _save(tmp_path / "spec.npy", spec)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"numcands": 3, "norm": norm, "interp": "INTERPOLATE", "numbetween": 4}))

    result = CliRunner().invoke(
        main,
        ["search", str(spec_path), "--config", str(config_path), "--numcands", "6"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["options"]["numcands"] == 6
    assert payload["options"]["interp"] == "INTERPOLATE"
    assert payload["result"]["numbetween"] == 4
    assert len(payload["result"]["candidates"]) == 6


def test_search_rejects_unknown_config_key(rng: np.random.Generator, tmp_path: Path) -> None:
    spec, _ = make_real_spectrum(rng, 64)
    spec_path = _save(tmp_path / "spec.npy", spec)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"harmonics": 4}))

    result = CliRunner().invoke(main, ["search", str(spec_path), "--config", str(config_path)])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "Unknown search config keys" in result.output


def test_search_missing_spectrum(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["search", str(tmp_path / "missing.npy")])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "not found" in result.output


def test_search_invalid_spectrum_shape(tmp_path: Path) -> None:
    spec_path = _save(tmp_path / "cube.npy", np.zeros((4, 4, 4)))

    result = CliRunner().invoke(main, ["search", str(spec_path)])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "Invalid spectrum" in result.output


def test_search_negative_numcands(rng: np.random.Generator, tmp_path: Path) -> None:
    spec, _ = make_real_spectrum(rng, 64)
    spec_path = _save(tmp_path / "spec.npy", spec)

    result = CliRunner().invoke(main, ["search", str(spec_path), "--numcands", "-2"])

    assert result.exit_code == EXIT_INPUT_ERROR


def test_search_lobin_validated_by_library(rng: np.random.Generator, tmp_path: Path) -> None:
    spec, _ = make_real_spectrum(rng, 64)
    spec_path = _save(tmp_path / "spec.npy", spec)

    result = CliRunner().invoke(main, ["search", str(spec_path), "--lobin", "-5"])

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "lobin" in result.output


def test_runtime_failure_maps_to_runtime_exit(monkeypatch, rng: np.random.Generator, tmp_path: Path) -> None:
    spec, _ = make_real_spectrum(rng, 64)
    spec_path = _save(tmp_path / "spec.npy", spec)

    def _boom(*_args, **_kwargs):
        raise MemoryError("Unable to allocate oversampled spectrum")

    monkeypatch.setattr("fftsearch.cli.main.search_fft", _boom)
    result = CliRunner().invoke(main, ["search", str(spec_path)])

    assert result.exit_code == EXIT_RUNTIME_ERROR
    assert "Unable to allocate" in result.output


def test_binary_search_annotated_payload(rng: np.random.Generator, tmp_path: Path) -> None:
    minifft_path = _save(tmp_path / "mini.npy", make_minifft(rng, 256, {37.0: 1.0}))

    result = CliRunner().invoke(
        main,
        [
            "binary-search",
            str(minifft_path),
            "--full-n",
            "1048576",
            "--full-t",
            "1000",
            "--full-lo-r",
            "5000",
            "--numcands",
            "6",
            "--aliased",
            "--annotate",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["schema_version"] == "cli.binary_search.v1"
    assert payload["options"]["check_aliased"] is True
    assert payload["options"]["numcands"] == 6
    cands = payload["result"]["candidates"]
    assert len(cands) == 6
    assert cands[0]["mini_r"] == 37.0
    assert len(payload["notes"]) == 6
    assert payload["identifications"] == []


def test_binary_search_default_slots(rng: np.random.Generator, tmp_path: Path) -> None:
    minifft_path = _save(tmp_path / "mini.npy", make_minifft(rng, 128))

    result = CliRunner().invoke(
        main,
        ["binary-search", str(minifft_path), "--full-n", "1e6", "--full-t", "500", "--full-lo-r", "100"],
    )

    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["result"]["candidates"]) == 10


def test_binary_search_text_report_with_catalog(rng: np.random.Generator, tmp_path: Path) -> None:
    n, full_t, lo_r = 256, 1000.0, 190_000.0
    minifft_path = _save(tmp_path / "mini.npy", make_minifft(rng, n, {37.0: 1.0}))
    # Orbital period that places the modulation at mini-spectrum bin 37.
    orb_p = full_t * 37.0 / (2 * n)
    pulsar = KnownPulsar(
        jname="J1012+5307",
        ra_deg=153.139,
        dec_deg=53.117,
        p=full_t / (lo_r + n),
        epoch_mjd=50700.0,
        pb_days=orb_p / 86400.0,
    )
    catalog_path = tmp_path / "psrs.json"
    save_catalog([pulsar], catalog_path)
    out_path = tmp_path / "cands.txt"

    result = CliRunner().invoke(
        main,
        [
            "binary-search",
            str(minifft_path),
            "--full-n",
            "4194304",
            "--full-t",
            str(full_t),
            "--full-lo-r",
            str(lo_r),
            "--numcands",
            "3",
            "--catalog",
            str(catalog_path),
            "--ra-deg",
            "153.14",
            "--dec-deg",
            "53.12",
            "--fov-arcsec",
            "60",
            "--epoch-mjd",
            "50700",
            "--format",
            "text",
            "--out",
            str(out_path),
        ],
    )

    assert result.exit_code == 0, result.output
    text = out_path.read_text(encoding="utf-8")
    assert "P_orbit" in text
    assert "PSR J1012+5307" in text


def test_binary_search_catalog_requires_pointing(rng: np.random.Generator, tmp_path: Path) -> None:
    minifft_path = _save(tmp_path / "mini.npy", make_minifft(rng, 64))
    catalog_path = tmp_path / "psrs.json"
    catalog_path.write_text(json.dumps({"pulsars": []}))

    result = CliRunner().invoke(
        main,
        [
            "binary-search",
            str(minifft_path),
            "--full-n",
            "1e6",
            "--full-t",
            "500",
            "--full-lo-r",
            "100",
            "--catalog",
            str(catalog_path),
            "--ra-deg",
            "10",
        ],
    )

    assert result.exit_code == EXIT_INPUT_ERROR
    assert "--dec-deg" in result.output


def test_log_level_option_accepted(rng: np.random.Generator, tmp_path: Path) -> None:
    spec, _ = make_real_spectrum(rng, 64)
    spec_path = _save(tmp_path / "spec.npy", spec)

    result = CliRunner().invoke(main, ["--log-level", "debug", "search", str(spec_path), "--numcands", "1"])

    assert result.exit_code == 0, result.output
