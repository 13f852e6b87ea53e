#!/usr/bin/env python3
"""Entry point for running spectral graph analyses.

Loads an analysis config and a graph document, runs every configured
stage (structure, relevance, clustering, shortest paths) and writes the
report as JSON.

Usage:
    python run_analysis.py --config config.json --graph graph.json
    python run_analysis.py --config config.json --graph graph.json --output report.json
    python run_analysis.py --config config.json --graph graph.json --verbose
"""

import argparse
import json
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from dacite import DaciteError

from spectragraph.config import AnalysisConfig, analysis_hash, load_config
from spectragraph.errors import SpectragraphError

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.1f}s")
    log.info("Completed: %s in %.1fs", name, elapsed)


def run_pipeline(
    config: AnalysisConfig, graph_path: Path, output_path: Path | None
) -> dict:
    """Execute the analysis pipeline.

    Args:
        config: Validated analysis config.
        graph_path: Path to graph document JSON file.
        output_path: Where to write the report JSON; None prints it.

    Returns:
        The report as a plain dictionary.
    """
    from spectragraph.pipeline import analyze_graph, load_graph

    pipeline_start = time.monotonic()
    with stage_timer("Graph Loading"):
        graph = load_graph(json.loads(graph_path.read_text()))
        log.info("Graph: %r", graph)

    with stage_timer("Analysis"):
        report = analyze_graph(graph, config).to_dict()

    if output_path is not None:
        with stage_timer("Writing Report"):
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w") as f:
                json.dump(report, f, indent=2)
            log.info("Report written to %s", output_path)
    else:
        print(json.dumps(report, indent=2))

    total_elapsed = time.monotonic() - pipeline_start
    print(f"\n{'=' * 60}")
    print(f"Analysis complete in {total_elapsed:.1f}s")
    print(f"  Vertices:   {len(report['names'])}")
    print(f"  Edges:      {report['number_of_edges']}")
    print(f"  Components: {len(report['components'])}")
    if report["clusters"] is not None:
        print(
            f"  Clusters:   {len(report['clusters'])} "
            f"({report['clustering_method']}, Q={report['modularity']:.4f})"
        )
    if output_path is not None:
        print(f"  Report:     {output_path}")
    print(f"{'=' * 60}")
    return report


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run a spectral graph analysis"
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to analysis config JSON file",
    )
    parser.add_argument(
        "--graph",
        type=str,
        required=True,
        help="Path to graph JSON file (adjacency or weight matrix)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path for the report JSON (printed to stdout if omitted)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config)
    graph_path = Path(args.graph)
    for path in (config_path, graph_path):
        if not path.exists():
            print(f"Error: file not found: {path}", file=sys.stderr)
            sys.exit(1)

    try:
        config = load_config(config_path)
    except (DaciteError, ValueError) as exc:
        print(f"Error: invalid config {config_path}: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"Config hash: {analysis_hash(config)}")
    if config.description:
        print(f"Description: {config.description}")

    try:
        run_pipeline(
            config,
            graph_path,
            Path(args.output) if args.output else None,
        )
    except (SpectragraphError, ValueError):
        log.exception("Analysis failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
