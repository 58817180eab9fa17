from datetime import date
from flask import render_template, request, redirect, url_for, flash, jsonify, current_app, make_response, abort
from sqlalchemy.exc import SQLAlchemyError
from lostfound import db
from lostfound.auth.models import ACCOUNT_MODELS
from lostfound.constants import REPORT_STATUSES, REPORT_TYPES, ROLES
from lostfound.decorators import login_required
from . import admin
from .forms import CreateUserForm, EditUserForm
from .queries import (
    get_admin_stats, get_monthly_report_stats, get_recent_users, get_recent_reports,
    get_all_activity_logs, filter_logs, filter_reports, convert_logs_to_csv,
    list_users, create_user, update_user, delete_user, get_account, UserManagementError
)
from lostfound.security.queries import get_recent_activity_logs, list_reports


def flash_form_errors(form):
    for field_name, errors in form.errors.items():
        for error in errors:
            flash(f"{field_name.replace('_', ' ').title()}: {error}", "danger")


@admin.route('/dashboard/admin')
@login_required('admin')
def dashboard(user):
    try:
        context = {
            'stats': get_admin_stats(),
            'monthly': get_monthly_report_stats(),
            'recent_users': get_recent_users(),
            'recent_reports': get_recent_reports(),
            'logs': get_recent_activity_logs(),
        }
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load admin dashboard")
        flash("An error occurred while loading the dashboard", "danger")
        context = {'stats': {}, 'monthly': [], 'recent_users': [], 'recent_reports': [], 'logs': []}

    return render_template('admin/dashboard.html', user=user, **context)


@admin.route('/api/admin/stats', methods=['GET'])
@login_required('admin')
def stats_api(user):
    try:
        return jsonify({'stats': get_admin_stats(), 'monthly': get_monthly_report_stats()}), 200
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching admin stats")
        return jsonify({'error': 'Failed to fetch statistics'}), 500


# ---------- Users ---------- #

def load_users():
    try:
        return list_users()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load users")
        db.session.rollback()
        flash("An error occurred while loading users", "danger")
        return []


@admin.route('/dashboard/admin/users', methods=['GET'])
@login_required('admin')
def users_page(user):
    return render_template('admin/users.html', user=user, users=load_users(), form=CreateUserForm())


@admin.route('/api/admin/users', methods=['GET'])
@login_required('admin')
def users_api(user):
    role = request.args.get('role', '').strip()
    if role and role not in ROLES:
        return jsonify({'error': f"Role should be one of {', '.join(ROLES)}"}), 400
    try:
        return jsonify({'users': list_users(role or None)}), 200
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching users")
        return jsonify({'error': 'Failed to fetch users'}), 500


@admin.route('/dashboard/admin/users', methods=['POST'])
@login_required('admin')
def create_user_view(user):
    form = CreateUserForm()
    if not form.validate_on_submit():
        current_app.logger.warning("CreateUserForm validation failed: %s", form.errors)
        flash_form_errors(form)
        return render_template('admin/users.html', user=user, users=load_users(), form=form), 400

    try:
        account = create_user(
            name=form.name.data.strip(),
            nim_nip=form.nim_nip.data.strip(),
            username=form.username.data.strip(),
            role=form.role.data,
            password=form.password.data,
            admin_id=user['id'],
        )
    except UserManagementError as e:
        flash(str(e), "danger")
        return render_template('admin/users.html', user=user, users=load_users(), form=form), 409
    except SQLAlchemyError:
        current_app.logger.exception("Failed to create account")
        db.session.rollback()
        flash("There was an error creating the account. Please try again.", "danger")
        return render_template('admin/users.html', user=user, users=load_users(), form=form), 500

    flash(f"{account.name} has been added as a {form.role.data}.", "success")
    return redirect(url_for('admin.users_page'))


@admin.route('/dashboard/admin/users/<role>/<int:account_id>', methods=['GET', 'POST'])
@login_required('admin')
def edit_user(user, role, account_id):
    if role not in ACCOUNT_MODELS:
        abort(404)
    try:
        account = get_account(role, account_id)
    except UserManagementError as e:
        flash(str(e), "danger")
        return redirect(url_for('admin.users_page'))

    if request.method == 'GET':
        form = EditUserForm(
            name=account.name,
            identifier=getattr(account, 'nim_nip', ''),
            username=account.username
        ).for_role(role)
        return render_template('admin/edit_user.html', user=user, account=account.to_dict(), form=form)

    form = EditUserForm().for_role(role)
    if not form.validate_on_submit():
        flash_form_errors(form)
        return render_template('admin/edit_user.html', user=user, account=account.to_dict(), form=form), 400

    try:
        update_user(
            role, account_id,
            name=form.name.data.strip(),
            identifier=(form.identifier.data or '').strip() or None,
            username=form.username.data.strip(),
            password=form.password.data or None,
            admin_id=user['id'],
        )
    except UserManagementError as e:
        flash(str(e), "danger")
        return render_template('admin/edit_user.html', user=user, account=account.to_dict(), form=form), 409
    except SQLAlchemyError:
        current_app.logger.exception("Failed to update %s account %s", role, account_id)
        db.session.rollback()
        flash("There was an error updating the user. Please try again.", "danger")
        return render_template('admin/edit_user.html', user=user, account=account.to_dict(), form=form), 500

    flash("User information has been updated successfully.", "success")
    return redirect(url_for('admin.users_page'))


@admin.route('/dashboard/admin/users/<role>/<int:account_id>/delete', methods=['POST'])
@login_required('admin')
def delete_user_view(user, role, account_id):
    if role not in ACCOUNT_MODELS:
        abort(404)
    try:
        delete_user(role, account_id, admin_id=user['id'])
    except UserManagementError as e:
        flash(str(e), "danger")
        return redirect(url_for('admin.users_page'))
    except SQLAlchemyError:
        current_app.logger.exception("Failed to delete %s account %s", role, account_id)
        db.session.rollback()
        flash("There was an error deleting the user. Please try again.", "danger")
        return redirect(url_for('admin.users_page'))

    flash("User has been deleted successfully.", "success")
    return redirect(url_for('admin.users_page'))


# ---------- Reports ---------- #

def _report_filters():
    report_type = request.args.get('type', '').strip()
    status = request.args.get('status', '').strip()
    if report_type in ('', 'all'):
        report_type = None
    if status in ('', 'all'):
        status = None
    if report_type and report_type not in REPORT_TYPES:
        raise ValueError(f"Report type should be one of {', '.join(REPORT_TYPES)}")
    if status and status not in REPORT_STATUSES:
        raise ValueError(f"Status should be one of {', '.join(REPORT_STATUSES)}")
    return report_type, status, request.args.get('q', '').strip() or None


@admin.route('/dashboard/admin/reports')
@login_required('admin')
def reports_page(user):
    try:
        report_type, status, query = _report_filters()
    except ValueError as e:
        flash(str(e), "danger")
        report_type = status = query = None

    try:
        reports = list_reports()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load reports for admin")
        flash("An error occurred while loading reports", "danger")
        reports = []

    filtered = filter_reports(reports, report_type, status, query)
    return render_template('admin/reports.html', user=user, reports=filtered, total=len(reports),
                           statuses=REPORT_STATUSES, filters={'type': report_type, 'status': status, 'q': query})


@admin.route('/api/admin/reports', methods=['GET'])
@login_required('admin')
def reports_api(user):
    try:
        report_type, status, query = _report_filters()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        reports = list_reports()
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching reports for admin")
        return jsonify({'error': 'Failed to fetch reports'}), 500

    filtered = filter_reports(reports, report_type, status, query)
    return jsonify({'items': filtered, 'shown': len(filtered), 'total': len(reports)}), 200


# ---------- Activity logs ---------- #

@admin.route('/dashboard/admin/logs')
@login_required('admin')
def logs_page(user):
    query = request.args.get('q', '').strip()
    try:
        logs = get_all_activity_logs()
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load activity logs")
        flash("An error occurred while loading activity logs", "danger")
        logs = []
    return render_template('admin/logs.html', user=user, logs=filter_logs(logs, query), total=len(logs), q=query)


@admin.route('/api/admin/logs', methods=['GET'])
@login_required('admin')
def logs_api(user):
    query = request.args.get('q', '').strip()
    try:
        logs = get_all_activity_logs()
    except SQLAlchemyError:
        current_app.logger.exception("Error fetching activity logs")
        return jsonify({'error': 'Failed to fetch activity logs'}), 500
    filtered = filter_logs(logs, query)
    return jsonify({'logs': filtered, 'shown': len(filtered), 'total': len(logs)}), 200


@admin.route('/dashboard/admin/logs/export', methods=['GET'])
@login_required('admin')
def export_logs(user):
    """Download the activity logs (filtered by ``q`` when given) as CSV."""
    query = request.args.get('q', '').strip()
    try:
        logs = filter_logs(get_all_activity_logs(), query)
    except SQLAlchemyError:
        current_app.logger.exception("Failed to export activity logs")
        flash("Failed to export activity logs. Please try again.", "danger")
        return redirect(url_for('admin.logs_page'))

    response = make_response(convert_logs_to_csv(logs))
    response.headers['Content-Type'] = 'text/csv; charset=utf-8'
    response.headers['Content-Disposition'] = f'attachment; filename=activity_logs_{date.today().isoformat()}.csv'
    current_app.logger.info("Admin %s exported %d activity logs", user['username'], len(logs))
    return response
