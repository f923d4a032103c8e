import argparse
import logging
import re
from typing import List, Optional, Sequence, Tuple

from fortune_voronoi import BoundingBox, compute_voronoi

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,\s]+")


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _read_sites(path: str) -> List[Tuple[float, float]]:
    sites: List[Tuple[float, float]] = []
    with open(path) as fin:
        for lineno, raw in enumerate(fin, start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            parts = [part for part in _SEPARATORS.split(line) if part]
            if len(parts) != 2:
                logger.warning("Skipping line %d: expected 'x y', got %r", lineno, raw.rstrip("\n"))
                continue
            try:
                sites.append((float(parts[0]), float(parts[1])))
            except ValueError:
                logger.warning("Skipping line %d: not a number pair: %r", lineno, raw.rstrip("\n"))
    return sites


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Compute a clipped Voronoi diagram with Fortune's sweep")
    parser.add_argument("path", help="File with one 'x y' site per line")
    parser.add_argument(
        "--bounds",
        nargs=4,
        type=float,
        metavar=("XMIN", "YMIN", "XMAX", "YMAX"),
        help="Clipping rectangle; enlarged when it does not contain the diagram",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    logger.info("Reading sites from %s", args.path)
    sites = _read_sites(args.path)
    logger.info("Read %d site(s)", len(sites))

    bounds = None
    if args.bounds:
        xmin, ymin, xmax, ymax = args.bounds
        try:
            bounds = BoundingBox(xmin, ymin, xmax, ymax)
        except ValueError as exc:
            logger.error("Invalid bounds: %s", exc)
            raise SystemExit(2)

    result = compute_voronoi(sites, bounds)
    if not result.success or result.diagram is None:
        logger.error("Construction failed: %s", result.error)
        raise SystemExit(1)

    for warning in result.warnings:
        logger.warning("%s", warning)

    diagram = result.diagram
    summary = diagram.summary()
    logger.info(
        "Diagram: %d sites, %d vertices (%d Voronoi), %d edges, bbox=%s",
        summary["sites"],
        summary["vertices"],
        summary["voronoi_vertices"],
        summary["edges"],
        summary["bbox"],
    )
    for (x1, y1), (x2, y2) in diagram.voronoi_segments():
        logger.info("segment (%.6g, %.6g) -> (%.6g, %.6g)", x1, y1, x2, y2)


if __name__ == "__main__":
    main()
