from flask import Flask, send_from_directory
from config import Config
from dotenv import load_dotenv
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect

# Load environment variables from .env file
load_dotenv()

# Initialize db globally
db = SQLAlchemy()

# Initialize migrate
migrate = Migrate()

csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    config_class.init_app(app)

    # Initialize db here, now it's part of the app's context
    db.init_app(app)

    migrate.init_app(app, db)
    csrf.init_app(app)

    from lostfound.auth.models import User, SecurityStaff, Admin, ActivityLog
    from lostfound.reports.models import LostItem, FoundItem

    from lostfound.auth import auth as auth_blueprint
    from lostfound.reports import reports as reports_blueprint
    from lostfound.security import security as security_blueprint
    from lostfound.admin import admin as admin_blueprint
    # Register blueprints
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(reports_blueprint)
    app.register_blueprint(security_blueprint)
    app.register_blueprint(admin_blueprint)

    # Uploaded item images are public, like a storage bucket
    @app.route(app.config['UPLOAD_URL_PREFIX'] + '/<path:filename>')
    def item_image(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    # Return the configured app
    return app
