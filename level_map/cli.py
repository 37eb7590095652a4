#!/usr/bin/env python3
"""
level_map CLI
Reduce the number of grey levels per channel of an image or a folder of images.

Usage:
  level-map INPUT --levels N [--mode uniform|igs] [--outdir DIR] [--no-stretch] --debug

Modes:
  uniform : Equal-width buckets, code = trunc(value / (256 / N)).
  igs     : Improved Grey Scale; carries the bucket remainder along each row-major
            channel scan to break up banding.

Output:
  PNG. If --outdir is omitted, writes <stem>_<mode><N>_levels.png next to INPUT.
  By default codes are stretched to 0..255 so the result is viewable; pass
  --no-stretch to save the raw codes.

Notes:
  Alpha is preserved and never quantized.
  Folder mode processes files in parallel (--jobs) and prints reports in order.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from .analysis import ChannelUsage, level_usage, max_code
from .core_types import ImageInfo, image_info
from .dispatch import quantize
from .display import stretch_codes
from .image_io import IMAGE_EXTS, load_image, save_image
from .mode import VARIANT_NAMES
from .utils import (
    debug_log,
    default_workers,
    enable_line_buffered_stdout,
    error,
    format_percentage,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

OUTPUT_SUFFIX = "_levels"


class QuantizeFailed(RuntimeError):
    """A file could not be quantized; the dispatcher already logged why."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="level-map",
        description="Quantize image(s) to a reduced number of grey levels per channel.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--levels", "-n", type=int, required=True, help="Levels per channel (1..256)"
    )
    parser.add_argument(
        "--mode",
        choices=list(VARIANT_NAMES),
        default="uniform",
        help="Quantization strategy.",
    )
    parser.add_argument(
        "--stretch",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Rescale codes to 0..255 before saving.",
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Internal workers"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        levels: int level count
        mode: "uniform" | "igs"
        stretch: bool, rescale codes for viewing
        jobs: parallel file workers
        workers: internal threads for the quantizer
        debug: bool for verbose details
    """
    return build_parser().parse_args(argv)


def output_path_for(
    src_path: Path, mode: str, levels: int, outdir: Optional[Path]
) -> Path:
    name = f"{src_path.stem}_{mode}{levels}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


# Per-file processing


@dataclass
class FileReport:
    """Everything needed to print one file's summary after the work is done."""

    src_path: Path
    out_path: Path
    info: ImageInfo
    has_alpha: bool
    usage: List[ChannelUsage]
    top_code: int
    load_secs: float
    quantize_secs: float
    save_secs: float


def process_single_image(
    src_path: Path,
    out_path: Path,
    mode: str,
    levels: int,
    stretch: bool,
    workers: int,
) -> FileReport:
    """
    Process a single image end-to-end without printing:
      load -> quantize -> optional stretch -> save.
    Raises QuantizeFailed when the dispatcher rejects the request.
    """
    t_start = time.perf_counter()
    pixels, alpha = load_image(src_path)
    info = image_info(pixels)
    t_loaded = time.perf_counter()

    result = quantize(pixels, levels, mode, workers=workers)
    if not result.success:
        raise QuantizeFailed(str(result.error))
    codes = result.image
    t_quantized = time.perf_counter()

    to_save = stretch_codes(codes, levels, mode) if stretch else codes
    written = save_image(out_path, to_save, alpha)
    t_saved = time.perf_counter()

    return FileReport(
        src_path=src_path,
        out_path=written,
        info=info,
        has_alpha=alpha is not None,
        usage=level_usage(codes),
        top_code=max_code(levels, mode),
        load_secs=t_loaded - t_start,
        quantize_secs=t_quantized - t_loaded,
        save_secs=t_saved - t_quantized,
    )


def print_report(
    report: FileReport, mode: str, levels: int, stretch: bool, debug: bool
) -> None:
    """Banner, per-channel level usage, output name and timing."""
    print_banner(report.src_path.name)
    info = report.info
    total_pixels = info.pixels
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{info.width}x{info.height}"),
                    ("Shape", "x".join(str(d) for d in info.shape)),
                    ("Channels", info.channels),
                    ("Alpha", report.has_alpha),
                ]
            )
        )

    log(f"Mode: {mode}  Levels: {levels}  Codes: 0..{report.top_code}")
    for usage in report.usage:
        log(
            f"  channel {usage.channel}: {usage.distinct} distinct"
            + (f"  (max {max(usage.codes)})" if usage.codes else "")
        )
        if debug:
            for code, count in zip(usage.codes, usage.counts):
                share = count / total_pixels if total_pixels else 0.0
                debug_log(
                    f"    code {code:3d}: pixels={count:,}  share={format_percentage(share)}"
                )

    log(
        f"Wrote {report.out_path.name} | size={info.width}x{info.height} | stretch={'on' if stretch else 'off'}"
    )
    total_secs = report.load_secs + report.quantize_secs + report.save_secs
    if debug:
        q_secs = report.quantize_secs
        if q_secs > 0:
            rate_mpx_s = (total_pixels / q_secs) / 1e6
            debug_log(
                f"throughput {rate_mpx_s:.2f} MPx/s  ({total_pixels / 1e6:.2f} MPx in {format_seconds_compact(q_secs)})"
            )
        debug_log(
            f"Total {format_total_duration_compact(total_secs)}  "
            f"(load={format_seconds_compact(report.load_secs)}, "
            f"quantize={format_seconds_compact(q_secs)}, "
            f"save={format_seconds_compact(report.save_secs)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(total_secs)}")


def _process_path(path: Path, args: argparse.Namespace) -> FileReport:
    return process_single_image(
        path,
        output_path_for(path, args.mode, args.levels, args.outdir),
        args.mode,
        args.levels,
        args.stretch,
        args.workers,
    )


def collect_images(folder: Path) -> List[Path]:
    """Image files in `folder` (not recursive), skipping earlier outputs."""
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode --jobs files are processed
    in parallel; reports are printed afterwards in file-name order.
    Returns the exit status: 0 on success, 1 if any file failed, 2 if the
    input does not exist.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Workers", args.workers),
            ("Jobs", args.jobs),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [("Mode", args.mode), ("Levels", args.levels), ("Stretch", args.stretch)]
            )
        )

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    files = collect_images(src) if src.is_dir() else [src]
    if args.debug and src.is_dir():
        debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)]))

    failures = 0
    with ThreadPoolExecutor(max_workers=max(1, args.jobs)) as ex:
        futures = [ex.submit(_process_path, p, args) for p in files]
        for path, fu in zip(files, futures):
            try:
                report = fu.result()
            except QuantizeFailed:
                # the dispatcher has already reported the reason
                failures += 1
                continue
            except OSError as exc:
                error(f"{path.name}: {exc}")
                failures += 1
                continue
            print_report(report, args.mode, args.levels, args.stretch, args.debug)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
