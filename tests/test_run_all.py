"""Tests for run_all.py (end-to-end pipeline)"""
import numpy as np
import pandas as pd
import pytest

from treatment_summary import cumulative_depth, run_all
from treatment_summary.config import SUMMARY_COLUMNS, SURFACE_DEPTH
from treatment_summary.integrity import RowCountMismatchError


def test_build_summary_dataset(raw_records):
    results = run_all.build_summary_dataset(raw_records)
    summary = results["summary_data"]
    assert len(summary) == len(results["base_summary"]) == 3
    assert list(summary.columns) == SUMMARY_COLUMNS
    assert list(results["depth_order"]) == [SURFACE_DEPTH, "0-15cm", "15-30cm"]
    assert results["checks"]["PASSED"].all()


def test_cumulative_means(raw_records):
    summary = run_all.build_summary_dataset(raw_records)["summary_data"]
    means = summary.set_index("sample_depth")["mean_per_change"]
    # base means: surface 3, 0-15cm 6, 15-30cm 9
    assert means[SURFACE_DEPTH] == pytest.approx(3.0)
    assert means["0-15cm"] == pytest.approx(4.5)
    assert means["15-30cm"] == pytest.approx(6.0)


def test_no_undefined_standard_errors(make_rows):
    raw = pd.concat([
        make_rows([2, np.nan, np.nan, np.nan, np.nan], sample_depth=np.nan),
        make_rows([1, 2, 3, 4, 5], sample_depth="0-15cm"),
    ], ignore_index=True)
    summary = run_all.build_summary_dataset(raw)["summary_data"]
    assert summary[["sem_per_change", "sem_actual_diff"]].notna().all().all()
    surface = summary.loc[summary["sample_depth"] == SURFACE_DEPTH].iloc[0]
    assert np.isinf(surface["sem_per_change"])


def test_undefined_se_at_depth_is_infinite_after_pooling(make_rows):
    raw = pd.concat([
        make_rows([1, 2, 3, 4, 5], sample_depth=np.nan),
        make_rows([9, np.nan, np.nan, np.nan, np.nan], sample_depth="0-15cm"),
    ], ignore_index=True)
    summary = run_all.build_summary_dataset(raw)["summary_data"]
    row = summary.loc[summary["sample_depth"] == "0-15cm"].iloc[0]
    assert row["mean_per_change"] == pytest.approx(6.0)
    assert np.isinf(row["sem_per_change"])
    assert np.isinf(row["sem_actual_diff"])
    surface = summary.loc[summary["sample_depth"] == SURFACE_DEPTH].iloc[0]
    assert surface["sem_per_change"] == pytest.approx(np.sqrt(0.5))


def test_row_count_mismatch_aborts(raw_records, monkeypatch):
    original = cumulative_depth.cumulative_summary
    monkeypatch.setattr(
        cumulative_depth, "cumulative_summary",
        lambda *args, **kwargs: original(*args, **kwargs).iloc[1:],
    )
    with pytest.raises(RowCountMismatchError):
        run_all.build_summary_dataset(raw_records)


def test_all_filtered_is_valid(make_rows):
    results = run_all.build_summary_dataset(make_rows([1, 2, 3]))
    assert results["summary_data"].empty
    assert len(results["depth_order"]) == 0


def test_min_comparisons_passed_through(make_rows):
    results = run_all.build_summary_dataset(make_rows([1, 2, 3]), min_comparisons=2)
    assert len(results["summary_data"]) == 1


def test_report_mentions_counts(raw_records):
    results = run_all.build_summary_dataset(raw_records)
    report = run_all.generate_text_report(results, n_raw=len(raw_records))
    assert f"Raw comparisons: {len(raw_records)}" in report
    assert "Checks passed: 6/6" in report


def test_main_writes_outputs(tmp_path, raw_records):
    raw_path = tmp_path / "ALL_raw.csv"
    raw_records.to_csv(raw_path, index=False)
    sites_path = tmp_path / "sites.csv"
    pd.DataFrame({"State": ["IA", "GA"]}).to_csv(sites_path, index=False)
    refs_path = tmp_path / "refs.csv"
    refs_path.write_bytes(b"Paper_id,citation\n1,A. DOI: 10.1/a\n")
    out = tmp_path / "out"

    run_all.main([
        "--raw", str(raw_path), "--sites", str(sites_path),
        "--references", str(refs_path), "--output-dir", str(out),
    ])

    summary = pd.read_csv(out / "summary_data.csv")
    assert len(summary) == 3
    assert (out / "treatment_summary.xlsx").exists()
    assert (out / "summary_report.txt").read_text(encoding="utf-8").startswith("=")
    sites = pd.read_csv(out / "site_data_with_regions.csv")
    assert list(sites["Region"]) == ["Midwest", "South"]
    refs = pd.read_csv(out / "references_linked.csv")
    assert refs.loc[0, "citation"].startswith("<a target=_blank")
