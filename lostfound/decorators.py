# lostfound/decorators.py
from flask import session, redirect, url_for, flash, current_app
from functools import wraps
from lostfound.constants import DASHBOARD_ENDPOINTS


def login_required(*roles):
    """Require a signed-in actor, optionally restricted to ``roles``.

    The wrapped view receives the session actor as its first argument.
    Actors of another role are sent to their own dashboard.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = session.get('user')

            if not user:
                flash("Please login first", "danger")
                return redirect(url_for('auth.login'))

            if roles and user.get('role') not in roles:
                current_app.logger.info(
                    "Actor %s with role %s refused access to %s",
                    user.get('username'), user.get('role'), f.__name__
                )
                endpoint = DASHBOARD_ENDPOINTS.get(user.get('role'))
                if not endpoint:
                    session.pop('user', None)
                    return redirect(url_for('auth.login'))
                return redirect(url_for(endpoint))

            return f(dict(user), *args, **kwargs)

        return decorated_function
    return decorator
