from flask import current_app
from sqlalchemy import or_
from lostfound import db
from lostfound.constants import REPORT_STATUSES
from lostfound.functions import save_image, InvalidImage
from lostfound.reports.models import REPORT_MODELS


def newest_first(rows):
    return sorted(rows, key=lambda r: r['created_at'] or '', reverse=True)


def submit_report(data, user_id, image_file=None):
    """Insert a lost or found report with status ``reported``.

    A failed image upload does not stop the report; it is saved without one.
    """
    image_url = None
    if image_file is not None and image_file.filename:
        try:
            image_url = save_image(image_file, user_id)
        except (InvalidImage, OSError):
            current_app.logger.warning("Image upload failed for user %s, continuing without image", user_id, exc_info=True)

    model = REPORT_MODELS[data['type']]
    report = model(
        user_id=user_id,
        name=data['name'],
        category=data['category'],
        description=data['description'],
        location=data['location'],
        event_date=data['date'],
        status='reported',
        image=image_url,
    )
    db.session.add(report)
    db.session.commit()
    current_app.logger.info("User %s reported %s item %s", user_id, data['type'], report.id)
    return report


def get_user_reports(user_id, report_type=None):
    types = [report_type] if report_type else list(REPORT_MODELS)
    rows = []
    for t in types:
        model = REPORT_MODELS[t]
        rows.extend(
            r.to_dict() for r in model.query.filter_by(user_id=user_id).order_by(model.created_at.desc()).all()
        )
    return newest_first(rows)


def count_by_status(reports):
    counts = {status: 0 for status in REPORT_STATUSES}
    for report in reports:
        if report['status'] in counts:
            counts[report['status']] += 1
    return counts


def user_report_stats(reports):
    stats = {
        'total': len(reports),
        'lost': sum(1 for r in reports if r['type'] == 'lost'),
        'found': sum(1 for r in reports if r['type'] == 'found'),
    }
    stats.update(count_by_status(reports))
    return stats


def escape_like(value):
    """Make ``%`` and ``_`` match themselves in a LIKE pattern."""
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def search_items(keyword=None, category=None, date_from=None, date_to=None, status=None, report_type=None):
    """Filter both report tables and merge the results, newest first."""
    results = []
    for t, model in REPORT_MODELS.items():
        if report_type and t != report_type:
            continue

        query = model.query
        if keyword:
            term = f"%{escape_like(keyword)}%"
            query = query.filter(
                or_(
                    model.name.ilike(term, escape='\\'),
                    model.description.ilike(term, escape='\\'),
                    model.location.ilike(term, escape='\\')
                )
            )
        if category:
            query = query.filter(model.category == category)
        if status:
            query = query.filter(model.status == status)
        if date_from:
            query = query.filter(model.event_date >= date_from)
        if date_to:
            query = query.filter(model.event_date <= date_to)

        for item in query.all():
            row = item.to_dict()
            results.append({
                key: row[key]
                for key in ('id', 'type', 'name', 'category', 'description', 'location',
                            'date', 'status', 'image', 'created_at')
            })

    return newest_first(results)


def get_categories():
    categories = set()
    for model in REPORT_MODELS.values():
        categories.update(c for (c,) in db.session.query(model.category).distinct() if c)
    return sorted(categories)
