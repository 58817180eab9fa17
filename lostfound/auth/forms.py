from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, SubmitField
from wtforms.validators import DataRequired, AnyOf


class LoginForm(FlaskForm):
    username = StringField(
        'Username',
        validators=[DataRequired(message='Username is required')]
    )

    password = PasswordField(
        'Password',
        validators=[DataRequired(message='Password is required')]
    )

    role = SelectField(
        'Login as',
        choices=[('user', 'User'), ('security', 'Security'), ('admin', 'Admin')],
        default='user',
        validators=[DataRequired(message='Please select a role'), AnyOf(['user', 'security', 'admin'])]
    )

    submit = SubmitField('Sign in')
