import os
import uuid
import warnings
from flask import current_app
from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename
from lostfound.constants import ALLOWED_EXTENSIONS
from lostfound import db
from lostfound.auth.models import ActivityLog


class InvalidImage(ValueError):
    pass


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def log_activity(action, user_id=None, security_id=None, admin_id=None):
    """Append an activity log entry attributed to at most one actor."""
    log = ActivityLog(
        action=action,
        user_id=user_id,
        security_id=security_id,
        admin_id=admin_id,
    )
    db.session.add(log)
    db.session.commit()
    return log


def save_image(image_file, owner_id):
    """Store an uploaded image and return its public URL."""
    if not image_file or not image_file.filename:
        return None
    if not allowed_file(image_file.filename):
        raise InvalidImage(f"File type not allowed: {image_file.filename}")

    try:
        # Oversized images count as invalid instead of only warning
        with warnings.catch_warnings():
            warnings.simplefilter('error', Image.DecompressionBombWarning)
            with Image.open(image_file.stream) as img:
                img.verify()
    except (UnidentifiedImageError, OSError,
            Image.DecompressionBombError, Image.DecompressionBombWarning) as e:
        raise InvalidImage(f"Not a valid image: {image_file.filename}") from e
    image_file.stream.seek(0)

    extension = secure_filename(image_file.filename).rsplit('.', 1)[1].lower()
    unique_filename = f"{owner_id}_{uuid.uuid4().hex}.{extension}"
    image_file.save(os.path.join(current_app.config['UPLOAD_FOLDER'], unique_filename))
    current_app.logger.info("Stored image %s for user %s", unique_filename, owner_id)

    return f"{current_app.config['UPLOAD_URL_PREFIX']}/{unique_filename}"
