from flask import Blueprint

reports = Blueprint('reports', __name__)

from .routes import home, submit, search, notifications  # noqa: E402,F401
