from __future__ import annotations

import io
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfforge.exceptions import InputInvalidError, SplitPolicyEmptyError
from pdfforge.split import (
    EveryNPolicy,
    PageRange,
    PagesPolicy,
    RangesPolicy,
    SplitPolicy,
    normalise_base_name,
    plan_split,
    split_document,
)


def test_ranges_split_into_two_documents(pdf_factory: Callable[..., bytes]) -> None:
    outputs = split_document(
        pdf_factory(10),
        {"splitType": "ranges", "ranges": [{"start": 1, "end": 5}, {"start": 6, "end": 10}]},
        base_name="report.pdf",
    )

    assert [item.filename for item in outputs] == [
        "report_pages_1_to_5.pdf",
        "report_pages_6_to_10.pdf",
    ]
    assert [item.label for item in outputs] == ["Pages 1-5", "Pages 6-10"]
    for item in outputs:
        assert len(PdfReader(io.BytesIO(item.data)).pages) == 5
        assert item.page_count == 5


def test_pages_policy_keeps_order_and_duplicates() -> None:
    groups = plan_split(PagesPolicy((3, 1, 3, 0, 11)), 10, base_name="doc")

    assert [group.page_indices for group in groups] == [(2,), (0,), (2,)]
    assert [group.filename for group in groups] == [
        "doc_page_3.pdf",
        "doc_page_1.pdf",
        "doc_page_3_2.pdf",
    ]
    assert [group.label for group in groups] == ["Page 3", "Page 1", "Page 3"]


def test_ranges_policy_clamps_and_drops() -> None:
    policy = RangesPolicy((PageRange(-2, 3), PageRange(8, 50), PageRange(12, 15), PageRange(5, 4)))

    groups = plan_split(policy, 10, base_name="doc")

    assert [group.page_numbers for group in groups] == [(1, 2, 3), (8, 9, 10)]
    assert [group.filename for group in groups] == ["doc_pages_1_to_3.pdf", "doc_pages_8_to_10.pdf"]


def test_repeated_ranges_get_distinct_names() -> None:
    policy = RangesPolicy((PageRange(1, 2), PageRange(1, 2), PageRange(1, 2)))

    names = [group.filename for group in plan_split(policy, 4, base_name="doc")]

    assert names == ["doc_pages_1_to_2.pdf", "doc_pages_1_to_2_2.pdf", "doc_pages_1_to_2_3.pdf"]


@pytest.mark.parametrize("page_count", [1, 2, 7, 10, 13])
@pytest.mark.parametrize("chunk_size", [1, 3, 5, 20])
def test_every_n_is_contiguous_and_exhaustive(page_count: int, chunk_size: int) -> None:
    groups = plan_split(EveryNPolicy(chunk_size), page_count)

    flattened = [index for group in groups for index in group.page_indices]
    assert flattened == list(range(page_count))
    for group in groups:
        assert list(group.page_indices) == list(range(group.page_indices[0], group.page_indices[-1] + 1))
    remainder = page_count % chunk_size
    assert len(groups[-1].page_indices) == (remainder or min(chunk_size, page_count))
    assert len({group.filename for group in groups}) == len(groups)


def test_every_n_floors_chunk_size() -> None:
    groups = plan_split(EveryNPolicy(0), 3, base_name="doc")
    assert [group.filename for group in groups] == ["doc_part_1.pdf", "doc_part_2.pdf", "doc_part_3.pdf"]
    assert groups[0].label == "Page 1"


def test_empty_plan_is_an_error() -> None:
    with pytest.raises(SplitPolicyEmptyError) as excinfo:
        plan_split(PagesPolicy((0, 12)), 10)
    assert excinfo.value.classification == "split-policy-empty"
    assert isinstance(excinfo.value, InputInvalidError)


def test_from_mapping_variants() -> None:
    assert SplitPolicy.from_mapping({"splitType": "pages", "pages": "1, 3,x"}) == PagesPolicy((1, 3))
    assert SplitPolicy.from_mapping({"splitType": "every", "everyNPages": "4"}) == EveryNPolicy(4)
    ranges = SplitPolicy.from_mapping({"splitType": "ranges", "ranges": [{"start": 2, "end": 3}, {"start": "a"}]})
    assert ranges == RangesPolicy((PageRange(2, 3),))


def test_from_mapping_unknown_type() -> None:
    with pytest.raises(InputInvalidError):
        SplitPolicy.from_mapping({"splitType": "diagonal"})


def test_default_base_name(pdf_factory: Callable[..., bytes]) -> None:
    outputs = split_document(pdf_factory(2), EveryNPolicy(1))
    assert [item.filename for item in outputs] == ["document_part_1.pdf", "document_part_2.pdf"]


def test_split_pages_outputs_single_page_documents(pdf_factory: Callable[..., bytes]) -> None:
    outputs = split_document(pdf_factory(4), PagesPolicy((4, 2)), base_name="scan")

    assert [item.page_numbers for item in outputs] == [(4,), (2,)]
    assert all(len(PdfReader(io.BytesIO(item.data)).pages) == 1 for item in outputs)


def test_split_document_empty_policy(pdf_factory: Callable[..., bytes]) -> None:
    with pytest.raises(SplitPolicyEmptyError):
        split_document(pdf_factory(2), {"splitType": "ranges", "ranges": [{"start": 5, "end": 9}]})


@pytest.mark.parametrize(
    "name, expected",
    [
        ("../../etc/evil", "evil"),
        ("C:\\reports\\q3.pdf", "q3"),
        ("..", "document"),
        ("  ", "document"),
        (None, "document"),
    ],
)
def test_base_name_drops_directories(name, expected) -> None:
    assert normalise_base_name(name) == expected


def test_output_names_never_contain_separators() -> None:
    groups = plan_split(EveryNPolicy(1), 2, base_name="../../etc/evil")
    assert [group.filename for group in groups] == ["evil_part_1.pdf", "evil_part_2.pdf"]
