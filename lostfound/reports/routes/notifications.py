from flask import jsonify, render_template
from .. import reports
from lostfound.decorators import login_required
from lostfound.notifications import (
    get_user_notifications, unread_count, mark_notification_as_read,
    mark_all_notifications_as_read, delete_notification, clear_all_notifications
)


def _listing(user_id):
    notifications = get_user_notifications(user_id)
    return {
        'notifications': notifications,
        'unread_count': unread_count(notifications)
    }


@reports.route('/dashboard/user/notifications')
@login_required('user')
def notifications_page(user):
    return render_template('user/notifications.html', user=user, **_listing(user['id']))


@reports.route('/api/notifications', methods=['GET'])
@login_required('user')
def get_notifications(user):
    """
    Get all notifications for the current user, newest first
    """
    return jsonify(_listing(user['id'])), 200


@reports.route('/api/notifications/<notification_id>/read', methods=['POST'])
@login_required('user')
def mark_notification_read(user, notification_id):
    if not any(n.get('id') == notification_id for n in get_user_notifications(user['id'])):
        return jsonify({'error': 'Notification not found'}), 404
    if not mark_notification_as_read(user['id'], notification_id):
        return jsonify({'error': 'Failed to mark notification as read'}), 500
    return jsonify(dict(_listing(user['id']), success=True)), 200


@reports.route('/api/notifications/read_all', methods=['POST'])
@login_required('user')
def mark_all_notifications_read(user):
    if not mark_all_notifications_as_read(user['id']):
        return jsonify({'error': 'Failed to mark notifications as read'}), 500
    return jsonify({'success': True, 'unread_count': 0}), 200


@reports.route('/api/notifications/<notification_id>', methods=['DELETE'])
@login_required('user')
def remove_notification(user, notification_id):
    if not delete_notification(user['id'], notification_id):
        return jsonify({'error': 'Failed to delete notification'}), 500
    return jsonify(dict(_listing(user['id']), success=True)), 200


@reports.route('/api/notifications', methods=['DELETE'])
@login_required('user')
def clear_notifications(user):
    if not clear_all_notifications(user['id']):
        return jsonify({'error': 'Failed to clear notifications'}), 500
    return jsonify({'success': True, 'unread_count': 0}), 200
