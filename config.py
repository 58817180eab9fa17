import os
from pathlib import Path

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent

class Config:
    # Secret key - will be validated later
    SECRET_KEY = os.getenv('SECRET_KEY')

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')

    # Image storage: files are written to UPLOAD_FOLDER and served under UPLOAD_URL_PREFIX
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'instance', 'item-images')
    UPLOAD_URL_PREFIX = '/item-images'

    # Per-user notification documents, kept outside the database
    NOTIFICATION_STORAGE_DIR = os.getenv('NOTIFICATION_STORAGE_DIR') or os.path.join(BASE_DIR, 'instance', 'notifications')

    # SQLAlchemy
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Flask settings
    DEBUG = os.getenv('FLASK_ENV') == 'development'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Security settings (only in production)
    SESSION_COOKIE_SECURE = os.getenv('FLASK_ENV') == 'production'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Upload size limit
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB

    @classmethod
    def init_app(cls, app):
        """Initialize configuration with the app instance"""
        app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

        # Set defaults for development if not set
        if not app.config['SECRET_KEY']:
            if app.config['DEBUG'] or app.config.get('TESTING'):
                app.config['SECRET_KEY'] = 'dev-secret-key-for-development-only'
                app.logger.warning('Using default SECRET_KEY for development')
            else:
                raise ValueError('SECRET_KEY must be set in production')

        if not app.config['SQLALCHEMY_DATABASE_URI']:
            if app.config['DEBUG']:
                # Default SQLite for development
                app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///' + os.path.join(BASE_DIR, 'database.db')
                app.logger.warning('Using SQLite database for development')
            else:
                raise ValueError('DATABASE_URL must be set in production')

        # Create storage folders if they don't exist
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
        os.makedirs(app.config['NOTIFICATION_STORAGE_DIR'], exist_ok=True)
