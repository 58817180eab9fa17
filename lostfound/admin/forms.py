from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, SubmitField
from wtforms.validators import DataRequired, Optional, Length, EqualTo

IDENTIFIER_LABELS = {'user': 'NIM/NIP', 'security': 'KTA'}


class CreateUserForm(FlaskForm):
    name = StringField(
        'Full Name',
        validators=[DataRequired(message='Name must be at least 2 characters.'),
                    Length(min=2, max=150, message='Name must be at least 2 characters.')]
    )

    nim_nip = StringField(
        'NIM/NIP (KTA for security staff)',
        validators=[DataRequired(message='NIM/NIP must be at least 2 characters.'),
                    Length(min=2, max=50, message='NIM/NIP must be at least 2 characters.')]
    )

    username = StringField(
        'Username',
        validators=[DataRequired(message='Username must be at least 3 characters.'),
                    Length(min=3, max=80, message='Username must be at least 3 characters.')]
    )

    role = SelectField(
        'Role',
        choices=[('user', 'User'), ('security', 'Security')],
        validators=[DataRequired(message='Please select a role.')]
    )

    password = PasswordField(
        'Password',
        validators=[DataRequired(message='Password must be at least 6 characters.'),
                    Length(min=6, message='Password must be at least 6 characters.')]
    )

    confirm_password = PasswordField(
        'Confirm Password',
        validators=[DataRequired(message='Password must be at least 6 characters.'),
                    EqualTo('password', message='Passwords do not match')]
    )

    submit = SubmitField('Create Account')


class EditUserForm(FlaskForm):
    name = StringField(
        'Full Name',
        validators=[DataRequired(message='Name must be at least 2 characters.'),
                    Length(min=2, max=150, message='Name must be at least 2 characters.')]
    )

    identifier = StringField(
        'NIM/NIP',
        validators=[Optional(), Length(min=2, max=50, message='NIM/NIP must be at least 2 characters.')]
    )

    username = StringField(
        'Username',
        validators=[DataRequired(message='Username must be at least 3 characters.'),
                    Length(min=3, max=80, message='Username must be at least 3 characters.')]
    )

    password = PasswordField(
        'New Password',
        validators=[Optional(), Length(min=6, message='Password must be at least 6 characters.')],
        description="Leave blank to keep the current password"
    )

    submit = SubmitField('Save Changes')

    def for_role(self, role):
        # Security staff are identified by their KTA number
        self.identifier.label.text = IDENTIFIER_LABELS.get(role, 'NIM/NIP')
        return self
