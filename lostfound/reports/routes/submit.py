from flask import render_template, request, redirect, url_for, flash, current_app
from sqlalchemy.exc import SQLAlchemyError
from .. import reports
from lostfound import db
from lostfound.decorators import login_required
from lostfound.functions import log_activity
from lostfound.notifications import add_notification
from lostfound.reports.forms import ReportItemForm
from lostfound.reports.queries import submit_report


@reports.route('/dashboard/user/report', methods=['GET'])
@login_required('user')
def new_report(user):
    """Render the report form"""
    form = ReportItemForm(report_type=request.args.get('type', 'lost'))
    return render_template('user/report_form.html', form=form, user=user)


@reports.route('/dashboard/user/report', methods=['POST'])
@login_required('user')
def create_report(user):
    form = ReportItemForm()

    if not form.validate_on_submit():
        current_app.logger.warning("ReportItemForm validation failed: %s", form.errors)

        # Show specific validation errors for each field
        for field_name, errors in form.errors.items():
            for error in errors:
                field_display_name = field_name.replace('_', ' ').title()
                flash(f"{field_display_name}: {error}", "danger")

        return render_template('user/report_form.html', form=form, user=user), 400

    data = form.to_report_data()
    try:
        report = submit_report(data, user['id'], form.image.data)
    except SQLAlchemyError:
        current_app.logger.exception("Failed while processing report submission")
        db.session.rollback()
        flash("There was an error submitting your report. Please try again.", "danger")
        return render_template('user/report_form.html', form=form, user=user), 500

    try:
        log_activity(f"{data['type'].title()} item \"{report.name}\" reported", user_id=user['id'])
    except SQLAlchemyError:
        current_app.logger.warning("Could not log report %s creation", report.id, exc_info=True)
        db.session.rollback()

    add_notification(
        user['id'],
        f"Your {data['type']} item '{report.name}' has been reported successfully.",
        'report',
        related_item_id=report.id
    )

    flash(f"Your {data['type']} item report has been submitted successfully.", "success")
    return redirect(url_for('reports.dashboard'))
