from __future__ import annotations

import pytest

from lib_sender_options import SenderOptions
from lib_sender_options.testing import i_should_fail, reset_client_id_sequence


def test_i_should_fail_raises_runtime_error() -> None:
    with pytest.raises(RuntimeError, match="^i should fail$"):
        i_should_fail()


def test_i_should_fail_reexported() -> None:
    from lib_sender_options import i_should_fail as exported
    from lib_sender_options.testing import i_should_fail as original

    assert exported is original


def test_reset_client_id_sequence_restarts_numbering() -> None:
    SenderOptions.create()
    reset_client_id_sequence(5)
    assert SenderOptions.create().client_id == "producer-5"
    reset_client_id_sequence()
