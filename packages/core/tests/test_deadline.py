from unittest.mock import patch

import pytest

from aigit_core.errors import DeadlineExceededError
from aigit_core.utils.deadline import Deadline


def test_unbounded_deadline_never_expires():
    deadline = Deadline(None)
    assert deadline.remaining() is None
    assert not deadline.expired
    deadline.check()


def test_remaining_counts_down():
    with patch("aigit_core.utils.deadline.time.monotonic", side_effect=[100.0, 104.0]):
        deadline = Deadline(10)
        assert deadline.remaining() == 6.0


def test_expired_deadline_raises_on_check():
    with patch("aigit_core.utils.deadline.time.monotonic", side_effect=[100.0, 111.0]):
        deadline = Deadline(10)
        with pytest.raises(DeadlineExceededError, match="deadline of 10s exceeded"):
            deadline.check()


def test_deadline_exceeded_is_a_timeout():
    assert issubclass(DeadlineExceededError, TimeoutError)


def test_sleep_within_budget():
    with patch("aigit_core.utils.deadline.time.sleep") as sleep:
        Deadline(60).sleep(2.0)
    sleep.assert_called_once_with(2.0)


def test_sleep_is_cut_short_by_deadline():
    with patch("aigit_core.utils.deadline.time.monotonic", side_effect=[100.0, 109.0]):
        deadline = Deadline(10)
        with patch("aigit_core.utils.deadline.time.sleep") as sleep:
            with pytest.raises(DeadlineExceededError):
                deadline.sleep(4.0)
    sleep.assert_called_once_with(1.0)
