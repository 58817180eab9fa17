"""Per-user notification lists.

Notifications never touch the relational database. Each user's list is a
JSON document in ``NOTIFICATION_STORAGE_DIR`` under the key
``lost_and_found_notifications_<user_id>``; clearing that directory loses
them. Storage errors are logged and reported through the return value.
"""
import json
import os
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from flask import current_app
from lostfound.constants import NOTIFICATION_TYPES

STORAGE_KEY = 'lost_and_found_notifications'

_locks = {}
_locks_guard = threading.Lock()


def _storage_path(user_id):
    return os.path.join(current_app.config['NOTIFICATION_STORAGE_DIR'], f"{STORAGE_KEY}_{user_id}.json")


def _lock_for(path):
    with _locks_guard:
        return _locks.setdefault(path, threading.Lock())


def _write(user_id, notifications):
    path = _storage_path(user_id)
    with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=os.path.dirname(path),
                                     prefix=os.path.basename(path), suffix='.tmp', delete=False) as fh:
        json.dump(notifications, fh)
    try:
        os.replace(fh.name, path)
    except OSError:
        os.unlink(fh.name)
        raise


def get_user_notifications(user_id):
    """Newest-first notifications for ``user_id``; empty when none are stored."""
    path = _storage_path(user_id)
    if not os.path.exists(path):
        return []
    try:
        with open(path, encoding='utf-8') as fh:
            notifications = json.load(fh)
    except (OSError, ValueError):
        current_app.logger.exception("Error retrieving notifications for user %s", user_id)
        return []
    if not isinstance(notifications, list):
        current_app.logger.warning("Ignoring malformed notification store for user %s", user_id)
        return []
    return notifications


def unread_count(notifications):
    return sum(1 for n in notifications if not n.get('is_read'))


def add_notification(user_id, message, notification_type, related_item_id=None):
    if notification_type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {notification_type!r}")

    notification = {
        'id': uuid.uuid4().hex,
        'message': message,
        'type': notification_type,
        'related_item_id': related_item_id,
        'is_read': False,
        'created_at': datetime.now(timezone.utc).isoformat(),
    }
    return _update(user_id, lambda items: [notification] + items, 'adding notification')


def _update(user_id, transform, description):
    """Read, transform and rewrite one user's list under that list's lock."""
    try:
        with _lock_for(_storage_path(user_id)):
            _write(user_id, transform(get_user_notifications(user_id)))
    except OSError:
        current_app.logger.exception("Error %s for user %s", description, user_id)
        return False
    return True


def mark_notification_as_read(user_id, notification_id):
    return _update(
        user_id,
        lambda items: [dict(n, is_read=True) if n.get('id') == notification_id else n for n in items],
        'marking notification as read'
    )


def mark_all_notifications_as_read(user_id):
    return _update(
        user_id,
        lambda items: [dict(n, is_read=True) for n in items],
        'marking all notifications as read'
    )


def delete_notification(user_id, notification_id):
    return _update(
        user_id,
        lambda items: [n for n in items if n.get('id') != notification_id],
        'deleting notification'
    )


def clear_all_notifications(user_id):
    return _update(user_id, lambda items: [], 'clearing notifications')
