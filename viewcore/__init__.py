"""Core (UI-agnostic) list-view and expense aggregation logic.

This package contains:
- comparators and predicates over tagged field values
- filter / sort / paginate stages and the list view orchestrator
- a cooperative debounce controller
- expense aggregation (category stats, period comparison)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
