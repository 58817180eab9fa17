from flask_wtf import FlaskForm
from wtforms import SelectField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional, Length
from lostfound.reports.status import STATUS_LABELS, allowed_next_statuses


class VerifyReportForm(FlaskForm):
    status = SelectField(
        'New Status',
        validators=[DataRequired(message='Please select a status.')]
    )

    notes = TextAreaField(
        'Notes (Optional)',
        validators=[Optional(), Length(max=500, message='Notes must be less than 500 characters')],
        description="Add any notes or comments about this status update..."
    )

    submit = SubmitField('Update Status')

    def for_report(self, current_status):
        """Offer only the statuses the report may move to."""
        self.status.choices = [(s, STATUS_LABELS[s]) for s in allowed_next_statuses(current_status)]
        if not self.status.choices:
            self.status.render_kw = {'disabled': True}
            self.notes.render_kw = {'disabled': True}
        return self
