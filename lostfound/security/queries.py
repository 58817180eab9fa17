from sqlalchemy import func
from lostfound import db
from lostfound.auth.models import ActivityLog
from lostfound.reports.models import REPORT_MODELS
from lostfound.reports.queries import newest_first


def list_reports(status=None, limit=None):
    """Reports of both types with reporter names, newest first."""
    rows = []
    for model in REPORT_MODELS.values():
        query = model.query
        if status:
            query = query.filter(model.status == status)
        query = query.order_by(model.created_at.desc())
        if limit:
            query = query.limit(limit)
        rows.extend(r.to_dict() for r in query.all())
    rows = newest_first(rows)
    return rows[:limit] if limit else rows


def get_pending_reports():
    return list_reports(status='reported')


def get_all_reports():
    return list_reports()


def status_counts():
    """Per-table row counts keyed by status, e.g. ``{'lost': {'reported': 2}}``."""
    counts = {}
    for report_type, model in REPORT_MODELS.items():
        rows = db.session.query(model.status, func.count(model.id)).group_by(model.status).all()
        counts[report_type] = dict(rows)
    return counts


def get_security_stats():
    counts = status_counts()
    lost = sum(counts['lost'].values())
    found = sum(counts['found'].values())

    def both(status):
        return counts['lost'].get(status, 0) + counts['found'].get(status, 0)

    return {
        'total': lost + found,
        'lost': lost,
        'found': found,
        'pending': both('reported'),
        'verified': both('verified'),
        'matched': both('matched'),
        'returned': both('returned'),
    }


def get_recent_activity_logs(limit=5):
    logs = ActivityLog.query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
    if limit:
        logs = logs.limit(limit)
    return [log.to_dict() for log in logs.all()]
