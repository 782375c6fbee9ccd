#!/usr/bin/env python3

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import tifffile

from kymophase.config import BoundaryMode, PhaseMapConfig
from kymophase.errors import InvalidInputError
from kymophase.phase_map import WaveletPhaseEngine

logger = logging.getLogger("kymophase")


def build_parser():
    defaults = PhaseMapConfig()
    parser = argparse.ArgumentParser(
        prog="kymophase",
        description="Wavelet phase map and wave counts of a kymograph",
    )
    parser.add_argument("kymograph", type=Path, help="2D kymograph image (TIFF), rows = t, columns = x")
    parser.add_argument("-o", "--out-dir", type=Path, default=None,
                        help="output directory (default: next to the input)")
    parser.add_argument("--octaves", type=float, default=defaults.octave_number)
    parser.add_argument("--voices", type=float, default=defaults.voices_per_octave,
                        help="voices per octave")
    parser.add_argument("--sigma", type=float, default=defaults.gauss_sigma,
                        help="Gaussian pre-smoothing sigma")
    parser.add_argument("--x0", type=float, default=defaults.x0)
    parser.add_argument("--x1", type=float, default=defaults.x1)
    parser.add_argument("--sigma0", type=float, default=defaults.sigma0, help="voice number up to x0")
    parser.add_argument("--sigma1", type=float, default=defaults.sigma1, help="voice number from x1")
    parser.add_argument("--subtraction-point", type=int, default=None,
                        help="reference column for the phase-difference profiles")
    parser.add_argument("--mirrored", action="store_true",
                        help="reflect samples past the column ends into the wavelet sum")
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = PhaseMapConfig(
            octave_number=args.octaves,
            voices_per_octave=args.voices,
            gauss_sigma=args.sigma,
            x0=args.x0,
            x1=args.x1,
            sigma0=args.sigma0,
            sigma1=args.sigma1,
            subtraction_point=args.subtraction_point,
            boundary_mode=BoundaryMode.MIRRORED if args.mirrored else BoundaryMode.TRUNCATED,
        )
    except InvalidInputError as e:
        logger.error("invalid parameters: %s", e)
        return 2

    image = np.squeeze(tifffile.imread(args.kymograph))
    if image.ndim != 2:
        logger.error("%s is not a single 2D image (shape %s)", args.kymograph, image.shape)
        return 2
    logger.info("loaded %s, %d rows x %d columns", args.kymograph, *image.shape)

    try:
        result = WaveletPhaseEngine(config, workers=args.workers).compute(image)
    except InvalidInputError as e:
        logger.error("phase map failed: %s", e)
        return 1

    out_dir = args.out_dir if args.out_dir is not None else args.kymograph.parent
    out_dir.mkdir(parents=True, exist_ok=True)
    stem = args.kymograph.stem

    phase_path = out_dir / f"{stem}_phase.tif"
    tifffile.imwrite(phase_path, result.phase.astype(np.float32))
    logger.info("wrote %s", phase_path)

    if result.profile_map is not None:
        profile_path = out_dir / f"{stem}_phase_profile.tif"
        tifffile.imwrite(profile_path, result.profile_map.astype(np.float32))
        logger.info("wrote %s", profile_path)

    counts_path = out_dir / f"{stem}_wave_counts.csv"
    result.wave_count_frame().to_csv(counts_path, index=False)
    logger.info("wrote %s", counts_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
