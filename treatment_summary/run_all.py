"""
Orchestrator: build the depth-cumulative summary dataset and a report.

Usage:
    python -m treatment_summary.run_all [--raw PATH] [--sites PATH]
                                        [--references PATH] [--workers N]
"""

import argparse
import logging
import time
from pathlib import Path

import pandas as pd

from treatment_summary.config import (
    DEPTH_COL, MIN_COMPARISONS, OUTPUT_DIR, RAW_CSV, REFERENCES_CSV, SITE_CSV,
    SUMMARY_COLUMNS,
)
from treatment_summary import (
    base_summary,
    cumulative_depth,
    depth_order,
    integrity,
    loaders,
    normalize,
    references,
    regions,
)


def build_summary_dataset(raw: pd.DataFrame, max_workers: int = 1, **filter_kwargs) -> dict:
    """Run the full aggregation pipeline on raw comparison records.

    Raises:
        RowCountMismatchError: the cumulative summary lost or duplicated rows.
    """
    records = normalize.normalize_records(raw)
    base_results = base_summary.run(records, **filter_kwargs)
    base = base_results["base_summary"]

    order = depth_order.resolve_depth_order(base[DEPTH_COL])
    cum_results = cumulative_depth.run(base, order, max_workers=max_workers)
    summary_data = cum_results["summary_data"]

    integrity.check_row_count(base, summary_data)

    return {
        **base_results,
        "depth_order": order,
        "summary_data": summary_data[SUMMARY_COLUMNS],
        "checks": integrity.verify_summary(
            base, summary_data,
            min_comparisons=filter_kwargs.get("min_comparisons", MIN_COMPARISONS),
        ),
    }


def generate_text_report(results: dict, n_raw: int) -> str:
    """Human-readable summary of the build."""
    lines = [
        "=" * 80,
        "TREATMENT COMPARISON SUMMARY REPORT",
        "=" * 80,
        "",
        "1. INPUT",
        "-" * 60,
        f"  Raw comparisons: {n_raw}",
        f"  Configurations before filtering: {len(results['unfiltered'])}",
        "",
        "2. BASE FILTERS (groups rejected)",
        "-" * 60,
        results["filter_counts"].to_string(index=False),
        f"\n  Base summary rows: {len(results['base_summary'])}",
        "",
        "3. DEPTH ORDER",
        "-" * 60,
    ]
    for rank, depth in enumerate(results["depth_order"]):
        lines.append(f"  {rank:>3}  {depth}")
    lines += [
        "",
        "4. INVARIANT CHECKS",
        "-" * 60,
        results["checks"].to_string(index=False),
        "",
        "=" * 80,
        f"Summary rows: {len(results['summary_data'])}  "
        f"Checks passed: {int(results['checks']['PASSED'].sum())}/{len(results['checks'])}",
    ]
    return "\n".join(lines)


def save_outputs(results: dict, output_dir: Path) -> None:
    """Write the summary tables as CSV and a single Excel workbook."""
    output_dir.mkdir(parents=True, exist_ok=True)
    results["summary_data"].to_csv(output_dir / "summary_data.csv", index=False)
    results["base_summary"].to_csv(output_dir / "summary_base.csv", index=False)

    order_df = pd.DataFrame({
        "rank": range(len(results["depth_order"])),
        DEPTH_COL: list(results["depth_order"]),
    })
    with pd.ExcelWriter(output_dir / "treatment_summary.xlsx") as writer:
        results["base_summary"].to_excel(writer, sheet_name="base_summary", index=False)
        results["summary_data"].to_excel(writer, sheet_name="summary_data", index=False)
        order_df.to_excel(writer, sheet_name="depth_order", index=False)
        results["checks"].to_excel(writer, sheet_name="checks", index=False)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--raw", type=Path, default=RAW_CSV)
    parser.add_argument("--sites", type=Path, default=SITE_CSV)
    parser.add_argument("--references", type=Path, default=REFERENCES_CSV)
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR)
    parser.add_argument("--workers", type=int, default=1,
                        help="threads for the per-depth cumulative step")
    parser.add_argument("--min-comparisons", type=int, default=MIN_COMPARISONS)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    t0 = time.time()

    print(f"Loading data from {args.raw}")
    raw = loaders.load_raw_data(args.raw)
    print(f"  Shape: {raw.shape}")

    print("\n--- Building summary dataset ---")
    results = build_summary_dataset(
        raw, max_workers=args.workers, min_comparisons=args.min_comparisons)

    if args.sites.exists():
        print("--- Adding regions to site table ---")
        sites = regions.add_regions(loaders.load_sites(args.sites))
        args.output_dir.mkdir(parents=True, exist_ok=True)
        sites.to_csv(args.output_dir / "site_data_with_regions.csv", index=False)

    if args.references.exists():
        print("--- Linking reference DOIs ---")
        refs = references.link_references(loaders.load_references(args.references))
        args.output_dir.mkdir(parents=True, exist_ok=True)
        refs.to_csv(args.output_dir / "references_linked.csv", index=False)

    print("--- Saving outputs ---")
    save_outputs(results, args.output_dir)

    report = generate_text_report(results, n_raw=len(raw))
    report_path = args.output_dir / "summary_report.txt"
    report_path.write_text(report, encoding="utf-8")
    print(f"\nReport saved to: {report_path}")
    print(f"All steps completed in {time.time() - t0:.1f}s")
    print("\n" + report)


if __name__ == "__main__":
    main()
