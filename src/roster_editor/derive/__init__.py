"""Derived views recomputed from the document after each edit."""

from .pipeline import (
    AutocompleteIndex,
    DerivedViews,
    build_autocomplete_index,
    derive,
    filter_indexed,
    filter_vehicles,
    sort_rosters,
    vehicle_matches,
)

__all__ = [
    "AutocompleteIndex",
    "DerivedViews",
    "build_autocomplete_index",
    "derive",
    "filter_indexed",
    "filter_vehicles",
    "sort_rosters",
    "vehicle_matches",
]
