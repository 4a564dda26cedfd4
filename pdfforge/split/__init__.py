"""Page-group splitting for :mod:`pdfforge`."""

from .planner import (
    EveryNPolicy,
    PageRange,
    PagesPolicy,
    RangesPolicy,
    SplitGroup,
    SplitPolicy,
    normalise_base_name,
    plan_split,
)
from .splitter import split_document

__all__ = [
    "EveryNPolicy",
    "PageRange",
    "PagesPolicy",
    "RangesPolicy",
    "SplitGroup",
    "SplitPolicy",
    "normalise_base_name",
    "plan_split",
    "split_document",
]
