from flask import render_template, request, redirect, url_for, flash, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from .. import reports
from lostfound.decorators import login_required
from lostfound.constants import REPORT_TYPES
from lostfound.notifications import get_user_notifications
from lostfound.reports.forms import ReportItemForm
from lostfound.reports.queries import get_user_reports, user_report_stats


@reports.route('/dashboard/user')
@login_required('user')
def dashboard(user):
    try:
        my_reports = get_user_reports(user['id'])
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load reports for user %s", user['id'])
        flash("An error occurred while loading your reports", "danger")
        my_reports = []

    notifications = [n for n in get_user_notifications(user['id']) if not n.get('is_read')]
    current_app.logger.debug("Loaded dashboard for user %s with %d reports", user['id'], len(my_reports))

    return render_template(
        'user/dashboard.html',
        user=user,
        stats=user_report_stats(my_reports),
        recent_reports=my_reports[:6],
        notifications=notifications,
        form=ReportItemForm()
    )


@reports.route('/dashboard/user/reports')
@login_required('user')
def my_reports_page(user):
    return render_template('user/reports.html', user=user)


@reports.route('/api/user/reports', methods=['GET'])
@login_required('user')
def my_reports(user):
    """
    GET /api/user/reports?type=lost|found
    Returns the signed-in user's reports, newest first.
    """
    report_type = request.args.get('type', '').strip() or None
    if report_type and report_type not in REPORT_TYPES:
        return jsonify({'error': f"Report type should be one of {', '.join(REPORT_TYPES)}"}), 400

    try:
        items = get_user_reports(user['id'], report_type)
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching user reports")
        return jsonify({'error': 'Failed to fetch reports'}), 500

    return jsonify({'items': items, 'stats': user_report_stats(items)}), 200


@reports.route('/dashboard')
@login_required()
def any_dashboard(user):
    return redirect(url_for('auth.index'))
