from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from lostfound import db
from lostfound.constants import REPORT_STATUSES
from lostfound.functions import log_activity
from lostfound.reports.models import REPORT_MODELS
from lostfound.reports.status import STATUS_ACTIONS, can_transition


class ReportNotFound(LookupError):
    pass


class InvalidTransition(ValueError):
    pass


def get_report(report_type, report_id):
    model = REPORT_MODELS.get(report_type)
    if model is None:
        raise ReportNotFound(f"Unknown report type: {report_type!r}")
    report = db.session.get(model, report_id)
    if report is None:
        raise ReportNotFound(f"Report not found: {report_id}")
    return report


def update_report_status(report_type, report_id, status, notes=None, security_id=None, admin_id=None):
    """Write ``status`` to a report, then record the action in the activity log.

    The status is taken as given; there is no check against the current
    value and no locking, so concurrent updates resolve as last-writer-wins.
    The log entry is written after the status commit and a failure there is
    only logged.
    """
    if status not in REPORT_STATUSES:
        raise InvalidTransition(f"Unknown report status: {status!r}")

    report = get_report(report_type, report_id)
    previous = report.status
    report.status = status
    db.session.commit()
    current_app.logger.info(
        "%s report %s moved from %s to %s (security=%s admin=%s)",
        report_type, report_id, previous, status, security_id, admin_id
    )

    action = STATUS_ACTIONS.get(status, f"marked as {status}")
    message = f"{'Lost' if report_type == 'lost' else 'Found'} item \"{report.name}\" {action}"
    # Log actions stay on one line
    notes = ' '.join((notes or '').split())
    if notes:
        message += f": {notes}"

    try:
        log_activity(message, security_id=security_id, admin_id=admin_id)
    except SQLAlchemyError:
        current_app.logger.warning("Continuing despite activity log error for %s report %s", report_type, report_id, exc_info=True)
        db.session.rollback()

    return report


def verify_report(report_type, report_id, status, notes=None, security_id=None, admin_id=None):
    """Apply a verifier's choice, refusing targets outside the allowed set."""
    report = get_report(report_type, report_id)
    if not can_transition(report.status, status):
        raise InvalidTransition(
            f"Cannot move a {report.status} report to {status}"
            if report.status != 'returned'
            else "Items marked as 'returned' cannot be modified."
        )
    return update_report_status(report_type, report_id, status, notes, security_id, admin_id)
