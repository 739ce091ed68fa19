"""Keep the graph selection pointing at something after a refresh."""

from __future__ import annotations

from collections.abc import Iterable

from graphdrop.core.log import logger
from graphdrop.model.header import CommitId, RevHeader


def recover_selection(
    selected: RevHeader | None,
    headers: Iterable[RevHeader],
    working_copy_id: CommitId | None,
) -> RevHeader | None:
    """Find the selected revision in a fresh snapshot.

    The selection follows its change id, so a rewritten revision stays
    selected. If the change is gone (abandoned, squashed away) the
    working-copy commit is selected instead.

    Args:
        selected: Header selected before the refresh, if any
        headers: Headers of the freshly rendered graph
        working_copy_id: Commit id of the working copy

    Returns:
        Header to select, or None if neither can be found
    """
    headers = list(headers)

    if selected is not None:
        for header in headers:
            if header.id.change == selected.id.change:
                return header
        logger.debug(
            "Selected revision disappeared",
            change=selected.id.change.hex,
        )

    if working_copy_id is not None:
        for header in headers:
            if header.id.commit == working_copy_id:
                return header

    return None
