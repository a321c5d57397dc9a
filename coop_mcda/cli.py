# -*- coding: utf-8 -*-
"""
Command-line entry point.

Usage
-----
    coop-mcda branches.csv                         # rank and save outputs/
    coop-mcda branches.csv --weights weights.json  # custom weights
    coop-mcda branches.csv --config run.json       # settings saved with Config.save
    coop-mcda branches.csv --sensitivity --plots   # robustness + charts
    coop-mcda branches.csv --json                  # print analysis JSON
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import Category, Config, get_default_config
from .data_loader import load_branches_csv
from .logger import PipelineLogger, log_context, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='coop-mcda',
        description='Rank cooperative branches by TOPSIS performance score.')
    parser.add_argument('branches', help='CSV file with one row per branch')
    parser.add_argument('--config', metavar='JSON',
                        help='configuration file written by Config.save')
    parser.add_argument('--weights', metavar='JSON',
                        help='JSON file with criterion weights (top level or under "weights")')
    parser.add_argument('--output', help='output directory (default: from config, "outputs")')
    parser.add_argument('--sensitivity', action='store_true',
                        help='run Monte Carlo weight sensitivity analysis')
    parser.add_argument('--plots', action='store_true', help='save PNG charts')
    parser.add_argument('--json', action='store_true', help='print the analysis as JSON')
    parser.add_argument('--log-file', help='write a DEBUG log to this file')
    parser.add_argument('--quiet', action='store_true', help='only log warnings and errors')
    return parser


def _load_weights(path: str) -> dict:
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get('weights'), dict):
        return data['weights']
    return data


def _load_config(args: argparse.Namespace) -> Config:
    """Configuration file first, then command-line overrides."""
    config = Config.load(Path(args.config)) if args.config else get_default_config()
    if args.output:
        config.paths.output_dir = Path(args.output)
    if args.log_file:
        config.logging.log_file = args.log_file
    if args.quiet:
        config.logging.level = 'WARNING'
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Run the ranking; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = _load_config(args)
    except (OSError, ValueError, TypeError) as e:
        setup_logger(level='ERROR').error(f"Cannot read configuration: {e}")
        return 1

    logger = setup_logger(level=config.logging.level,
                          log_file=config.logging.log_file,
                          use_colors=config.logging.use_colors)
    out = PipelineLogger(logger)

    # Import here to avoid slow startup for --help
    from .analysis import run_sensitivity_analysis
    from .output_manager import OutputManager
    from .ranking import analyze

    with log_context(input=Path(args.branches).name):
        try:
            if args.weights:
                config.criteria = config.criteria.with_weights(_load_weights(args.weights))
            branches = load_branches_csv(args.branches)
        # InvalidWeights, InvalidInput and JSONDecodeError are all ValueErrors
        except (OSError, ValueError) as e:
            logger.error(f"Cannot start analysis: {e}")
            return 1

        out.banner("BRANCH PERFORMANCE RANKING (TOPSIS)")
        result = analyze(branches, config=config)
        if not result.success:
            logger.error(f"Analysis failed: {result.error}")
            return 1

        out.section("RESULTS")
        out.metrics({
            'Branches': result.analysis_metadata.total_branches,
            'Excellent': len(result.by_category(Category.EXCELLENT)),
        })
        out.ranking([(b.branch_name, b.topsis_score) for b in result.ranked_branches],
                    title="TOPSIS ranking")

        sensitivity = None
        if args.sensitivity:
            out.section("SENSITIVITY")
            sensitivity = run_sensitivity_analysis(branches, config=config)
            out.metric('Overall robustness', sensitivity.overall_robustness)
            out.metric('Mean rank correlation', sensitivity.mean_rank_correlation)

        manager = OutputManager(str(config.paths.output_dir))
        saved = manager.save_all(result, sensitivity)

        if args.plots:
            from .visualization import RankingVisualizer
            viz = RankingVisualizer(str(manager.figures_dir))
            saved['scores_chart'] = viz.plot_topsis_scores(result, config.thresholds)
            if sensitivity is not None:
                saved['sensitivity_chart'] = viz.plot_weight_sensitivity(
                    sensitivity.weight_sensitivity)

        for name, path in saved.items():
            out.step(f"{name}: {path}", status="done")

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str))

    return 0


if __name__ == '__main__':
    sys.exit(main())
