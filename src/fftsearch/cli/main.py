"""`fftsearch` command group: plain and binary spectrum searches."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click

from fftsearch.annotate import annotate_binary_candidates
from fftsearch.catalogs.pulsars import ObservationInfo, describe_candidate_match, load_pulsar_catalog
from fftsearch.cli.common_cli import (
    EXIT_INPUT_ERROR,
    EXIT_RUNTIME_ERROR,
    LOG_LEVELS,
    FftSearchCliError,
    configure_logging,
    dump_json_output,
    dump_text_output,
    load_spectrum_file,
    resolve_optional_output_path,
    resolve_search_config,
)
from fftsearch.errors import InvalidCandidateCountError
from fftsearch.report import format_binary_candidates
from fftsearch.search import search_fft, search_minifft

logger = logging.getLogger(__name__)

_INTERP_CHOICE = click.Choice(["interbin", "interpolate"], case_sensitive=False)


def _run_search(func: Any, *args: Any, **kwargs: Any) -> Any:
    try:
        return func(*args, **kwargs)
    except (InvalidCandidateCountError, ValueError) as exc:
        raise FftSearchCliError(str(exc), exit_code=EXIT_INPUT_ERROR) from exc
    except FftSearchCliError:
        raise
    except Exception as exc:
        raise FftSearchCliError(str(exc), exit_code=EXIT_RUNTIME_ERROR) from exc


@click.group()
@click.version_option(package_name="fftsearch")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for library diagnostics (written to stderr).",
)
def main(log_level: str) -> None:
    """Harmonic-summing Fourier-domain searches for periodic signals."""
    configure_logging(log_level)


@main.command("search")
@click.argument("spectrum_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--lobin", type=int, default=0, show_default=True, help="Lowest Fourier bin searched.")
@click.option("--numharmsum", type=int, default=None, help="Highest harmonic order summed.")
@click.option("--numbetween", type=int, default=None, help="Oversampling factor.")
@click.option("--interp", type=_INTERP_CHOICE, default=None, help="Sub-bin resolution strategy.")
@click.option("--norm", type=float, default=None, help="Divide every power by this value.")
@click.option("--sigma", "sigmacutoff", type=float, default=None, help="Significance cutoff when --numcands is 0.")
@click.option("--numcands", type=int, default=None, help="Fixed candidate count (0 = sigma-driven).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with search settings; flags override it.",
)
@click.option(
    "--out",
    "output_path_arg",
    type=str,
    default="-",
    show_default=True,
    help="JSON output path; '-' writes to stdout.",
)
def search_command(
    spectrum_path: Path,
    lobin: int,
    numharmsum: int | None,
    numbetween: int | None,
    interp: str | None,
    norm: float | None,
    sigmacutoff: float | None,
    numcands: int | None,
    config_path: Path | None,
    output_path_arg: str,
) -> None:
    """Search a short complex spectrum (.npy) for periodic candidates."""
    out_path = resolve_optional_output_path(output_path_arg)
    config = resolve_search_config(
        config_path,
        numharmsum=numharmsum,
        numbetween=numbetween,
        interp=interp,
        norm=norm,
        sigmacutoff=sigmacutoff,
        numcands=numcands,
    )
    spectrum = load_spectrum_file(spectrum_path)
    result = _run_search(search_fft, spectrum, lobin=int(lobin), **config.search_kwargs())

    payload = {
        "schema_version": "cli.search.v1",
        "result": result.model_dump(mode="json"),
        "options": {"lobin": int(lobin), **config.to_dict()},
        "inputs_summary": {"spectrum_path": str(spectrum_path), "num_bins": int(spectrum.size)},
    }
    dump_json_output(payload, out_path)


@main.command("binary-search")
@click.argument("minifft_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--full-n", type=float, required=True, help="Points in the original long transform.")
@click.option("--full-t", type=float, required=True, help="Duration of the original time series (s).")
@click.option("--full-lo-r", type=float, required=True, help="First long-transform bin that was mini-transformed.")
@click.option("--numcands", type=int, default=None, help="Number of candidate slots (default 10).")
@click.option("--numharmsum", type=int, default=None, help="Highest harmonic order summed.")
@click.option("--numbetween", type=int, default=None, help="Oversampling factor.")
@click.option("--interp", type=_INTERP_CHOICE, default=None, help="Sub-bin resolution strategy.")
@click.option(
    "--aliased/--no-aliased",
    "check_aliased",
    default=None,
    help="Also search frequencies aliased about Nyquist.",
)
@click.option("--annotate", is_flag=True, default=False, help="Flag duplicate and harmonic candidates.")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Known-pulsar catalog (CSV or JSON) used to identify candidates.",
)
@click.option("--ra-deg", type=float, default=None, help="Pointing right ascension (deg).")
@click.option("--dec-deg", type=float, default=None, help="Pointing declination (deg).")
@click.option("--fov-arcsec", type=float, default=None, help="Beam width (arcsec).")
@click.option("--epoch-mjd", type=float, default=None, help="Observation epoch (MJD).")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default="json",
    show_default=True,
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with search settings; flags override it.",
)
@click.option(
    "--out",
    "output_path_arg",
    type=str,
    default="-",
    show_default=True,
    help="Output path; '-' writes to stdout.",
)
def binary_search_command(
    minifft_path: Path,
    full_n: float,
    full_t: float,
    full_lo_r: float,
    numcands: int | None,
    numharmsum: int | None,
    numbetween: int | None,
    interp: str | None,
    check_aliased: bool | None,
    annotate: bool,
    catalog_path: Path | None,
    ra_deg: float | None,
    dec_deg: float | None,
    fov_arcsec: float | None,
    epoch_mjd: float | None,
    output_format: str,
    config_path: Path | None,
    output_path_arg: str,
) -> None:
    """Search a mini-spectrum (.npy) for binary-pulsar candidates."""
    out_path = resolve_optional_output_path(output_path_arg)
    config = resolve_search_config(
        config_path,
        numharmsum=numharmsum,
        numbetween=numbetween,
        interp=interp,
        check_aliased=check_aliased,
        numcands=numcands,
    )
    slots = config.numcands if config.numcands > 0 else 10

    obs: ObservationInfo | None = None
    catalog = None
    if catalog_path is not None:
        missing = [
            flag
            for flag, value in (
                ("--ra-deg", ra_deg),
                ("--dec-deg", dec_deg),
                ("--fov-arcsec", fov_arcsec),
                ("--epoch-mjd", epoch_mjd),
            )
            if value is None
        ]
        if missing:
            raise FftSearchCliError(f"--catalog requires {', '.join(missing)}", exit_code=EXIT_INPUT_ERROR)
        try:
            catalog = load_pulsar_catalog(catalog_path)
        except (OSError, KeyError, ValueError) as exc:
            raise FftSearchCliError(f"Cannot load pulsar catalog: {exc}", exit_code=EXIT_INPUT_ERROR) from exc
        obs = ObservationInfo(
            ra_deg=float(ra_deg),
            dec_deg=float(dec_deg),
            fov_arcsec=float(fov_arcsec),
            epoch_mjd=float(epoch_mjd),
        )

    minifft = load_spectrum_file(minifft_path)
    result = _run_search(
        search_minifft,
        minifft,
        slots,
        full_n=full_n,
        full_t=full_t,
        full_lo_r=full_lo_r,
        **config.minifft_kwargs(),
    )

    notes = annotate_binary_candidates(result.candidates) if annotate else [""] * len(result.candidates)
    identifications: list[dict[str, Any]] = []
    if catalog is not None and obs is not None:
        for number, cand in enumerate(result.candidates, start=1):
            if cand.is_sentinel:
                continue
            idx, text = describe_candidate_match(cand, obs, catalog)
            if idx:
                identifications.append({"candidate": number, "catalog_index": idx, "description": text})
                if not notes[number - 1]:
                    notes[number - 1] = text
        logger.info("Identified %d of %d candidates", len(identifications), result.num_candidates)

    if output_format.lower() == "text":
        dump_text_output(format_binary_candidates(result.candidates, notes), out_path)
        return

    options = {
        **config.to_dict(),
        "full_n": float(full_n),
        "full_t": float(full_t),
        "full_lo_r": float(full_lo_r),
        "numcands": int(slots),
        "annotate": bool(annotate),
        "catalog": str(catalog_path) if catalog_path is not None else None,
    }
    payload = {
        "schema_version": "cli.binary_search.v1",
        "result": result.model_dump(mode="json"),
        "notes": notes,
        "identifications": identifications,
        "options": options,
    }
    dump_json_output(payload, out_path)


if __name__ == "__main__":
    main()
