from datetime import date
from flask import jsonify, request, render_template, current_app
from sqlalchemy.exc import SQLAlchemyError
from .. import reports
from lostfound.decorators import login_required
from lostfound.constants import REPORT_TYPES, REPORT_STATUSES
from lostfound.reports.queries import search_items, get_categories


def _parse_date(value):
    return date.fromisoformat(value) if value else None


@reports.route('/dashboard/user/search')
@login_required('user')
def search_page(user):
    return render_template('user/search.html', user=user, statuses=REPORT_STATUSES)


@reports.route('/api/items/search', methods=['GET'])
@login_required()
def search(user):
    """
    GET /api/items/search?keyword=..&category=..&status=..&type=lost|found
                         &date_from=YYYY-MM-DD&date_to=YYYY-MM-DD
    Returns lost and found items matching every given filter, newest first.
    """
    keyword = request.args.get('keyword', '').strip()
    category = request.args.get('category', '').strip()
    status = request.args.get('status', '').strip()
    report_type = request.args.get('type', '').strip()

    if status and status not in REPORT_STATUSES:
        return jsonify({'error': f"Status should be one of {', '.join(REPORT_STATUSES)}"}), 400
    if report_type and report_type not in REPORT_TYPES:
        return jsonify({'error': f"Report type should be one of {', '.join(REPORT_TYPES)}"}), 400

    try:
        date_from = _parse_date(request.args.get('date_from', '').strip())
        date_to = _parse_date(request.args.get('date_to', '').strip())
    except ValueError:
        return jsonify({'error': 'Dates must use the YYYY-MM-DD format'}), 400

    try:
        results = search_items(
            keyword=keyword or None,
            category=category or None,
            date_from=date_from,
            date_to=date_to,
            status=status or None,
            report_type=report_type or None,
        )
    except SQLAlchemyError:
        current_app.logger.exception("Error searching items")
        return jsonify({'error': 'Failed to search items'}), 500

    return jsonify({'items': results, 'total': len(results)}), 200


@reports.route('/api/items/categories', methods=['GET'])
@login_required()
def categories(user):
    """
    Get the categories used by existing reports, for the filter dropdown.
    """
    try:
        return jsonify(get_categories()), 200
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching categories")
        return jsonify({'error': 'Failed to fetch categories'}), 500
