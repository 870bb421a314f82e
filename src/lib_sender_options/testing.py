"""Testing helpers that keep identifier synthesis and failure paths predictable.

Purpose
    Provide the reset hook for the process-wide client identifier sequence and
    an intentionally failing helper that exercises error-handling paths in the
    CLI suites.

Contents
    - ``reset_client_id_sequence``: restarts ``producer-<n>`` numbering.
    - ``FAILURE_MESSAGE``: stable message used when forcing a failure.
    - ``i_should_fail``: raises ``RuntimeError`` so callers can assert on the
      propagated error details.
"""

from __future__ import annotations

from typing import Final

from .domain.options import SenderOptions

FAILURE_MESSAGE: Final[str] = "i should fail"
"""Stable message emitted when ``i_should_fail`` triggers a failure sequence."""


def reset_client_id_sequence(start: int = 1) -> None:
    """Restart synthesized client identifiers at ``producer-<start>``.

    Why
        Tests asserting exact identifiers need a known starting point. Never
        call this in production code; identifiers issued before the reset may
        be handed out again.

    Examples
    --------
    >>> reset_client_id_sequence()
    >>> SenderOptions.create().client_id
    'producer-1'
    >>> SenderOptions.create().client_id
    'producer-2'
    """

    SenderOptions._client_ids.reset(start)


def i_should_fail() -> None:
    """Raise a deterministic :class:`RuntimeError` for failure-path testing.

    Examples
    --------
    >>> i_should_fail()
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)
