from flask import redirect, url_for, flash, request, render_template, current_app, session
from sqlalchemy.exc import SQLAlchemyError
from lostfound import db
from lostfound.constants import DASHBOARD_ENDPOINTS
from lostfound.decorators import login_required
from .models import authenticate
from . import auth
from .forms import LoginForm


@auth.route('/')
def index():
    user = session.get('user')
    if user and user.get('role') in DASHBOARD_ENDPOINTS:
        return redirect(url_for(DASHBOARD_ENDPOINTS[user['role']]))
    return redirect(url_for('auth.login'))


@auth.route('/login', methods=['GET', 'POST'])
def login():
    user = session.get('user')
    if user and user.get('role') in DASHBOARD_ENDPOINTS:
        flash("Already logged in", "info")
        return redirect(url_for(DASHBOARD_ENDPOINTS[user['role']]))

    form = LoginForm()
    if request.method == 'GET':
        return render_template('auth/login.html', form=form)

    if not form.validate_on_submit():
        current_app.logger.warning("LoginForm validation failed: %s", form.errors)
        for field_name, errors in form.errors.items():
            for error in errors:
                flash(f"{field_name.replace('_', ' ').title()}: {error}", "danger")
        return render_template('auth/login.html', form=form), 400

    try:
        account = authenticate(form.username.data.strip(), form.password.data, form.role.data)
    except SQLAlchemyError:
        current_app.logger.exception("Database error while signing in %s", form.username.data)
        db.session.rollback()
        flash("An internal error occurred. Please try again later.", "danger")
        return render_template('auth/login.html', form=form), 500

    if account is None:
        current_app.logger.info("Failed %s login attempt for %s", form.role.data, form.username.data)
        flash("Invalid username or password", "danger")
        return render_template('auth/login.html', form=form), 401

    actor = account.to_session()
    session.clear()
    session['user'] = actor
    current_app.logger.info("%s %s logged in", actor['role'].title(), actor['username'])
    flash("Logged in successfully", "success")
    return redirect(url_for(DASHBOARD_ENDPOINTS[actor['role']]))


@auth.route('/logout')
@login_required()
def logout(user):
    session.clear()
    current_app.logger.info("%s %s logged out", user['role'].title(), user['username'])
    flash("Logged out successfully", "success")
    return redirect(url_for('auth.login'))
