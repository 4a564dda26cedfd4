"""Copy planned page groups into independent output documents."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from ..backends import PypdfBackend
from ..backends.base import PDFBackend
from ..compress.profiles import COMPATIBILITY_PROFILE
from ..exceptions import PdfForgeError
from ..types import SplitOutput
from ..validation import validate_document
from .planner import SplitGroup, SplitPolicy, plan_split

LOGGER = logging.getLogger("pdfforge.split")


def _build_group(
    backend: PDFBackend,
    loaded,
    group: SplitGroup,
) -> SplitOutput:
    document = backend.new_document()
    for page in backend.fetch_pages(loaded, group.page_indices):
        backend.append_page(document, page)
    data = backend.save(document, COMPATIBILITY_PROFILE)
    validate_document(data, len(group.page_indices), backend=backend)
    return SplitOutput(
        filename=group.filename,
        label=group.label,
        page_numbers=group.page_numbers,
        data=data,
    )


def split_document(
    data: bytes,
    policy: Union[SplitPolicy, Mapping[str, Any]],
    *,
    base_name: Optional[str] = None,
    backend: Optional[PDFBackend] = None,
) -> List[SplitOutput]:
    """Split *data* into one document per planned group.

    Returns every output or raises; a failing group fails the request.

    Args:
        data: Source PDF bytes.
        policy: A :class:`SplitPolicy` or the wire mapping accepted by
            :meth:`SplitPolicy.from_mapping`.
        base_name: Stem used for output file names (``.pdf`` is stripped).

    Raises:
        SplitPolicyEmptyError: If the policy resolves to no group.
        InputInvalidError: If the source cannot be loaded.
    """

    if not isinstance(policy, SplitPolicy):
        policy = SplitPolicy.from_mapping(policy)

    backend = backend or PypdfBackend()
    loaded = backend.load(data, permissive=True)
    groups = plan_split(policy, loaded.num_pages, base_name=base_name)
    LOGGER.info("Splitting %d pages into %d documents", loaded.num_pages, len(groups))

    outputs: List[SplitOutput] = []
    for group in groups:
        try:
            outputs.append(_build_group(backend, loaded, group))
        except PdfForgeError:
            LOGGER.error("Failed to build %s (%s)", group.filename, group.label)
            raise
        except Exception as exc:
            LOGGER.error("Failed to build %s (%s): %s", group.filename, group.label, exc)
            raise PdfForgeError(f"Failed to create {group.filename}: {exc}") from exc
        LOGGER.debug("Wrote %s with %d pages", group.filename, len(group.page_indices))
    return outputs


__all__ = ["split_document"]
