from flask import render_template, request, redirect, url_for, flash, jsonify, current_app, abort
from sqlalchemy.exc import SQLAlchemyError
from lostfound import db
from lostfound.constants import REPORT_STATUSES, REPORT_TYPES
from lostfound.decorators import login_required
from lostfound.notifications import add_notification
from . import security
from .forms import VerifyReportForm
from .lifecycle import verify_report, get_report, ReportNotFound, InvalidTransition
from .queries import get_all_reports, get_pending_reports, get_security_stats, get_recent_activity_logs, list_reports

NOTIFICATION_MESSAGES = {
    'verified': ("Your {type} item '{name}' has been verified by security.", 'verification'),
    'matched': ("Your {type} item '{name}' has been matched with another report.", 'match'),
    'returned': ("Your {type} item '{name}' has been marked as returned.", 'return'),
}

SUCCESS_MESSAGES = {
    'verified': "verified",
    'matched': "marked as matched",
    'returned': "marked as returned to its owner",
}


def get_empty_stats():
    return dict.fromkeys(('total', 'lost', 'found', 'pending', 'verified', 'matched', 'returned'), 0)


@security.route('/dashboard/security')
@login_required('security')
def dashboard(user):
    try:
        stats = get_security_stats()
        pending = get_pending_reports()
        logs = get_recent_activity_logs()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load security dashboard")
        flash("An error occurred while loading the dashboard", "danger")
        stats, pending, logs = get_empty_stats(), [], []

    return render_template('security/dashboard.html', user=user, stats=stats, pending=pending, logs=logs)


@security.route('/dashboard/security/reports')
@login_required('security')
def reports_page(user):
    try:
        items = get_all_reports()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load reports for security")
        flash("An error occurred while loading reports", "danger")
        items = []
    return render_template('security/reports.html', user=user, reports=items)


@security.route('/api/security/reports', methods=['GET'])
@login_required('security', 'admin')
def reports_api(user):
    """
    GET /api/security/reports?status=reported
    Each report carries ``allowed_next_statuses`` and ``editable``.
    """
    status = request.args.get('status', '').strip()
    if status and status not in REPORT_STATUSES:
        return jsonify({'error': f"Status should be one of {', '.join(REPORT_STATUSES)}"}), 400
    try:
        return jsonify({'items': list_reports(status=status or None)}), 200
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching reports for security")
        return jsonify({'error': 'Failed to fetch reports'}), 500


@security.route('/api/security/stats', methods=['GET'])
@login_required('security', 'admin')
def stats_api(user):
    try:
        return jsonify(get_security_stats()), 200
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching security stats")
        return jsonify(get_empty_stats()), 500


@security.route('/dashboard/security/reports/<report_type>/<int:report_id>/verify', methods=['GET', 'POST'])
@login_required('security', 'admin')
def verify(user, report_type, report_id):
    if report_type not in REPORT_TYPES:
        abort(404)

    try:
        report = get_report(report_type, report_id)
    except ReportNotFound:
        flash("Report not found", "danger")
        return redirect(url_for('security.reports_page' if user['role'] == 'security' else 'admin.reports_page'))

    form = VerifyReportForm().for_report(report.status)
    if request.method == 'GET':
        return render_template('security/verify.html', user=user, report=report.to_dict(), form=form)

    if not report.to_dict()['editable']:
        flash("Items marked as 'returned' cannot be modified.", "danger")
        return render_template('security/verify.html', user=user, report=report.to_dict(), form=form), 409

    if not form.validate_on_submit():
        current_app.logger.warning("VerifyReportForm validation failed: %s", form.errors)
        for field_name, errors in form.errors.items():
            for error in errors:
                flash(f"{field_name.replace('_', ' ').title()}: {error}", "danger")
        return render_template('security/verify.html', user=user, report=report.to_dict(), form=form), 400

    status = form.status.data
    actor = {'security_id': user['id']} if user['role'] == 'security' else {'admin_id': user['id']}
    try:
        report = verify_report(report_type, report_id, status, form.notes.data or None, **actor)
    except InvalidTransition as e:
        flash(str(e), "danger")
        return render_template('security/verify.html', user=user, report=report.to_dict(), form=form), 409
    except (ReportNotFound, SQLAlchemyError):
        current_app.logger.exception("Error updating status of %s report %s", report_type, report_id)
        db.session.rollback()
        flash("There was an error updating the item status. Please try again.", "danger")
        return render_template('security/verify.html', user=user, report=report.to_dict(), form=form), 500

    template, notification_type = NOTIFICATION_MESSAGES[status]
    add_notification(
        report.user_id,
        template.format(type=report_type, name=report.name),
        notification_type,
        related_item_id=report.id
    )

    flash(f"The item has been {SUCCESS_MESSAGES[status]}.", "success")
    return redirect(url_for('security.dashboard' if user['role'] == 'security' else 'admin.reports_page'))
