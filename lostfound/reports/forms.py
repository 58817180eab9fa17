from datetime import date
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileAllowed
from wtforms import StringField, TextAreaField, SelectField, DateField, RadioField, SubmitField
from wtforms.validators import DataRequired, Optional, Length, ValidationError
from lostfound.constants import CATEGORIES, NAME_LIMIT, LOCATION_LIMIT, ALLOWED_EXTENSIONS

EARLIEST_REPORT_DATE = date(1900, 1, 1)


class ReportItemForm(FlaskForm):
    report_type = RadioField(
        'Report Type',
        choices=[('lost', 'Lost Item'), ('found', 'Found Item')],
        validators=[DataRequired(message='Please select whether the item was lost or found.')]
    )

    name = StringField(
        'Item Name',
        validators=[
            DataRequired(message='Title must be at least 3 characters.'),
            Length(min=3, max=NAME_LIMIT, message=f'Title must be between 3 and {NAME_LIMIT} characters.')
        ],
        description="e.g., Black Laptop Bag, Blue Water Bottle"
    )

    category = SelectField(
        'Category',
        choices=CATEGORIES,
        validators=[DataRequired(message='Please select a category.')]
    )

    description = TextAreaField(
        'Description',
        validators=[
            DataRequired(message='Description must be at least 10 characters.'),
            Length(min=10, message='Description must be at least 10 characters.')
        ],
        description="Describe the item, including brand, color, size, unique features..."
    )

    location = StringField(
        'Location',
        validators=[
            DataRequired(message='Location must be at least 3 characters.'),
            Length(min=3, max=LOCATION_LIMIT, message='Location must be at least 3 characters.')
        ],
        description="Where was it lost or found?"
    )

    date = DateField(
        'Date',
        format='%Y-%m-%d',
        validators=[DataRequired(message='Please select a date.')]
    )

    image = FileField(
        'Image',
        validators=[
            Optional(),
            FileAllowed(sorted(ALLOWED_EXTENSIONS), 'Only images are allowed (jpg, png, gif)')
        ]
    )

    submit = SubmitField('Submit Report')

    def validate_date(self, field):
        if field.data > date.today():
            raise ValidationError('Date cannot be in the future.')
        if field.data < EARLIEST_REPORT_DATE:
            raise ValidationError('Date cannot be before 1900.')

    def to_report_data(self):
        return {
            'type': self.report_type.data,
            'name': self.name.data.strip(),
            'category': self.category.data,
            'description': self.description.data.strip(),
            'location': self.location.data.strip(),
            'date': self.date.data,
        }
