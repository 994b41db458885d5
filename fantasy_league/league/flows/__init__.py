"""
Prefect flows for the fantasy league.

Flows handle orchestration and reporting; the per-participant work lives in
league.processing as Prefect tasks.

Structure:
- settle_round.py: Round settlement flow (stats -> participants -> finalize)
"""
