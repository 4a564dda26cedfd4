"""Turn a split policy and a page count into named page groups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence

from ..exceptions import InputInvalidError, SplitPolicyEmptyError
from ..utils import safe_filename

LOGGER = logging.getLogger("pdfforge.split")

DEFAULT_BASE_NAME = "document"


@dataclass(frozen=True)
class PageRange:
    """An inclusive, 1-based page range as requested by the caller."""

    start: int
    end: int


@dataclass(frozen=True)
class SplitGroup:
    """One output document: 0-based page indices, file name and label."""

    page_indices: tuple[int, ...]
    filename: str
    label: str

    @property
    def page_numbers(self) -> tuple[int, ...]:
        return tuple(index + 1 for index in self.page_indices)


@dataclass(frozen=True)
class _Draft:
    page_indices: tuple[int, ...]
    stem: str
    label: str


def _coerce_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        if isinstance(value, (int, float)):
            return int(value)
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


def _range_label(start: int, end: int) -> str:
    if start == end:
        return f"Page {start}"
    return f"Pages {start}-{end}"


class SplitPolicy:
    """Base class of the three split policies."""

    def drafts(self, page_count: int, base_name: str) -> Iterator[_Draft]:
        raise NotImplementedError

    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, Any]]) -> "SplitPolicy":
        """Build a policy from the ``splitType``/``pages``/``ranges``/``everyNPages`` fields."""

        payload = payload or {}
        split_type = str(payload.get("splitType") or "").strip().lower()

        if split_type == "pages":
            return PagesPolicy.parse(payload.get("pages"))
        if split_type == "ranges":
            return RangesPolicy.parse(payload.get("ranges"))
        if split_type == "every":
            chunk = _coerce_int(payload.get("everyNPages"))
            return EveryNPolicy(chunk if chunk is not None else 1)
        raise InputInvalidError(
            f"Unsupported split type {payload.get('splitType')!r}; "
            "expected 'pages', 'ranges' or 'every'."
        )


@dataclass(frozen=True)
class PagesPolicy(SplitPolicy):
    """One single-page output per requested page, in caller order."""

    pages: tuple[int, ...]

    @classmethod
    def parse(cls, value: Any) -> "PagesPolicy":
        if value is None:
            return cls(())
        if isinstance(value, str):
            tokens: Iterable[Any] = value.split(",")
        elif isinstance(value, (int, float)):
            tokens = [value]
        else:
            tokens = value
        numbers = (_coerce_int(token) for token in tokens)
        return cls(tuple(number for number in numbers if number is not None))

    def drafts(self, page_count: int, base_name: str) -> Iterator[_Draft]:
        for page in self.pages:
            if page <= 0 or page > page_count:
                LOGGER.debug("Dropping out-of-range page %s (of %s)", page, page_count)
                continue
            yield _Draft((page - 1,), f"{base_name}_page_{page}", f"Page {page}")


@dataclass(frozen=True)
class RangesPolicy(SplitPolicy):
    """One output per inclusive range, clamped to the document."""

    ranges: tuple[PageRange, ...]

    @classmethod
    def parse(cls, value: Any) -> "RangesPolicy":
        parsed: List[PageRange] = []
        for item in value or ():
            if isinstance(item, Mapping):
                start, end = _coerce_int(item.get("start")), _coerce_int(item.get("end"))
            elif isinstance(item, Sequence) and not isinstance(item, str) and len(item) == 2:
                start, end = _coerce_int(item[0]), _coerce_int(item[1])
            else:
                start = end = None
            if start is None or end is None:
                LOGGER.debug("Ignoring malformed range %r", item)
                continue
            parsed.append(PageRange(start, end))
        return cls(tuple(parsed))

    def drafts(self, page_count: int, base_name: str) -> Iterator[_Draft]:
        for page_range in self.ranges:
            start = max(1, page_range.start)
            end = min(page_count, page_range.end)
            if start > end:
                LOGGER.debug("Dropping empty range %s-%s", page_range.start, page_range.end)
                continue
            yield _Draft(
                tuple(range(start - 1, end)),
                f"{base_name}_pages_{start}_to_{end}",
                _range_label(start, end),
            )


@dataclass(frozen=True)
class EveryNPolicy(SplitPolicy):
    """Contiguous chunks of ``chunk_size`` pages covering the whole document."""

    chunk_size: int

    def drafts(self, page_count: int, base_name: str) -> Iterator[_Draft]:
        size = max(1, self.chunk_size)
        for part, first in enumerate(range(0, page_count, size), start=1):
            last = min(first + size, page_count)
            yield _Draft(
                tuple(range(first, last)),
                f"{base_name}_part_{part}",
                _range_label(first + 1, last),
            )


def normalise_base_name(name: Optional[str]) -> str:
    """Reduce *name* to a bare stem: directories and a ``.pdf`` suffix are dropped."""

    stem = safe_filename(name, "")
    if stem in {".", ".."}:
        return DEFAULT_BASE_NAME
    if stem.lower().endswith(".pdf"):
        stem = stem[:-4]
    return stem or DEFAULT_BASE_NAME


def plan_split(
    policy: SplitPolicy,
    page_count: int,
    *,
    base_name: Optional[str] = None,
) -> list[SplitGroup]:
    """Resolve *policy* against *page_count*.

    Repeated file names get ``_2``, ``_3`` ... suffixes in order of
    appearance. An empty plan raises :class:`SplitPolicyEmptyError`.
    """

    base = normalise_base_name(base_name)
    used: set[str] = set()
    groups: list[SplitGroup] = []

    for draft in policy.drafts(page_count, base):
        stem = draft.stem
        occurrence = 1
        while stem in used:
            occurrence += 1
            stem = f"{draft.stem}_{occurrence}"
        used.add(stem)
        groups.append(SplitGroup(draft.page_indices, f"{stem}.pdf", draft.label))

    if not groups:
        raise SplitPolicyEmptyError()
    return groups


__all__ = [
    "PageRange",
    "SplitGroup",
    "SplitPolicy",
    "PagesPolicy",
    "RangesPolicy",
    "EveryNPolicy",
    "normalise_base_name",
    "plan_split",
]
