"""Report status lifecycle.

A report starts as ``reported`` and only moves forward:

    reported -> verified -> matched -> returned

Any state may jump ahead, ``returned`` is terminal. The table below is what
verifiers are offered; the database itself accepts any of the four values.
"""
import enum


class ReportStatus(enum.Enum):
    REPORTED = 'reported'
    VERIFIED = 'verified'
    MATCHED = 'matched'
    RETURNED = 'returned'


ALLOWED_TRANSITIONS = {
    'reported': ('verified', 'matched', 'returned'),
    'verified': ('matched', 'returned'),
    'matched': ('returned',),
    'returned': (),
}

# Wording used in activity log entries
STATUS_ACTIONS = {
    'verified': 'verified',
    'matched': 'marked as matched',
    'returned': 'marked as returned to owner',
}

STATUS_LABELS = {
    'reported': 'Reported',
    'verified': 'Verified',
    'matched': 'Matched',
    'returned': 'Returned',
}


def allowed_next_statuses(current):
    """Statuses a verifier may move a report to from ``current``."""
    current = getattr(current, 'value', current) or ReportStatus.REPORTED.value
    if current not in ALLOWED_TRANSITIONS:
        raise ValueError(f"Unknown report status: {current!r}")
    return list(ALLOWED_TRANSITIONS[current])


def is_editable(status):
    return bool(allowed_next_statuses(status))


def can_transition(current, target):
    target = getattr(target, 'value', target)
    return target in allowed_next_statuses(current)
