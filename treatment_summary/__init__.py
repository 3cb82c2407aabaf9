"""
Depth-aware summary of soil treatment comparisons.

Modules:
    config           – shared constants (key columns, sentinels, paths, regions)
    loaders          – typed CSV loading for raw comparisons, sites, references
    normalize        – explicit "NA" category for blank categorical cells
    base_summary     – per-configuration mean / SE, paper counts, filters
    depth_order      – surface-first, numeric-aware depth ordering
    cumulative_depth – rolling surface-to-depth means + infinite-SE sanitising
    integrity        – row-count and filter invariant checks
    regions          – US state → region lookup for the site map table
    references       – DOI hyperlinks for citation strings
    run_all          – orchestrator: build the summary dataset + save report
"""
