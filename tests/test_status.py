import pytest

from lostfound.reports.status import (ReportStatus, allowed_next_statuses,
                                      can_transition, is_editable)


@pytest.mark.parametrize(
    "current, expected",
    [
        ("reported", ["verified", "matched", "returned"]),
        ("verified", ["matched", "returned"]),
        ("matched", ["returned"]),
        ("returned", []),
    ],
)
def test_allowed_next_statuses_follow_lifecycle(current, expected):
    assert allowed_next_statuses(current) == expected


def test_missing_status_is_treated_as_reported():
    assert allowed_next_statuses(None) == ["verified", "matched", "returned"]


def test_enum_members_are_accepted():
    assert allowed_next_statuses(ReportStatus.MATCHED) == ["returned"]


def test_only_returned_is_not_editable():
    assert is_editable("reported")
    assert is_editable("verified")
    assert is_editable("matched")
    assert not is_editable("returned")


def test_no_backward_transitions():
    assert not can_transition("matched", "verified")
    assert not can_transition("verified", "reported")
    assert can_transition("reported", "returned")


def test_unknown_status_rejected():
    with pytest.raises(ValueError):
        allowed_next_statuses("archived")
