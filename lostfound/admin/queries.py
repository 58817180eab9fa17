import calendar
import csv
import io
from datetime import date, datetime, time, timezone
from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from lostfound import db
from lostfound.auth.models import ACCOUNT_MODELS, ActivityLog
from lostfound.constants import CREATABLE_ROLES
from lostfound.functions import log_activity
from lostfound.reports.models import REPORT_MODELS
from lostfound.reports.queries import newest_first
from lostfound.security.queries import get_recent_activity_logs, list_reports, status_counts

CSV_HEADERS = ['ID', 'Action', 'Performed By', 'Timestamp']
DUPLICATE_ACCOUNT = "A user with this NIM/NIP or username already exists."


class UserManagementError(ValueError):
    pass


# ---------- Statistics ---------- #

def get_admin_stats():
    accounts = {role: model.query.count() for role, model in ACCOUNT_MODELS.items()}
    counts = status_counts()
    lost = sum(counts['lost'].values())
    found = sum(counts['found'].values())

    def both(status):
        return counts['lost'].get(status, 0) + counts['found'].get(status, 0)

    return {
        'total_users': sum(accounts.values()),
        'regular_users': accounts['user'],
        'security_users': accounts['security'],
        'admin_users': accounts['admin'],
        'total_reports': lost + found,
        'lost_reports': lost,
        'found_reports': found,
        'pending_reports': both('reported'),
        'matched_reports': both('matched'),
        'verified_reports': both('verified'),
        'returned_reports': both('returned'),
    }


def _shift_month(year, month, delta):
    index = year * 12 + (month - 1) - delta
    return index // 12, index % 12 + 1


def get_monthly_report_stats(today=None):
    """Lost/found/returned counts for the current month and the five before it.

    Buckets are ordered oldest first. Only reports created since the start of
    the oldest bucket count, and each is placed by its lost/found date.
    """
    today = today or date.today()
    months = [_shift_month(today.year, today.month, delta) for delta in range(5, -1, -1)]
    buckets = {
        key: {'name': calendar.month_abbr[key[1]], 'lost': 0, 'found': 0, 'returned': 0}
        for key in months
    }
    oldest_year, oldest_month = months[0]
    since = datetime.combine(date(oldest_year, oldest_month, 1), time.min, tzinfo=timezone.utc)

    for report_type, model in REPORT_MODELS.items():
        rows = db.session.query(model.event_date, model.status).filter(model.created_at >= since).all()
        for event_date, status in rows:
            bucket = buckets.get((event_date.year, event_date.month)) if event_date else None
            if bucket is None:
                continue
            bucket[report_type] += 1
            if status == 'returned':
                bucket['returned'] += 1

    return [buckets[key] for key in months]


def get_recent_reports(limit=5):
    return list_reports(limit=limit)


def get_recent_users(limit=5):
    users = []
    for role in CREATABLE_ROLES:
        model = ACCOUNT_MODELS[role]
        users.extend(a.to_dict() for a in model.query.order_by(model.created_at.desc()).limit(limit).all())
    return newest_first(users)[:limit]


# ---------- Reports ---------- #

def filter_reports(reports, report_type=None, status=None, query=None):
    result = list(reports)
    if report_type:
        result = [r for r in result if r['type'] == report_type]
    if status:
        result = [r for r in result if r['status'] == status]
    if query:
        query = query.lower()
        result = [
            r for r in result
            if any(query in (r.get(key) or '').lower()
                   for key in ('name', 'category', 'location', 'description', 'reporter_name'))
        ]
    return result


# ---------- Activity logs ---------- #

def get_all_activity_logs():
    return get_recent_activity_logs(limit=None)


def filter_logs(logs, query=None):
    if not query:
        return list(logs)
    query = query.lower()
    return [
        log for log in logs
        if query in log['action'].lower() or query in (log.get('user_name') or '').lower()
    ]


def _format_timestamp(value):
    if not value:
        return ''
    try:
        return datetime.fromisoformat(value).strftime('%Y-%m-%d %H:%M:%S')
    except ValueError:
        return value


def _single_line(value):
    return ' '.join(str(value or '').splitlines())


def convert_logs_to_csv(logs):
    """Render logs as CSV: a header line plus one line per log, every cell quoted."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(CSV_HEADERS)
    for log in logs:
        writer.writerow([
            log['id'],
            _single_line(log['action']),
            _single_line(log['user_name']),
            _format_timestamp(log['created_at']),
        ])
    return output.getvalue()[:-1]


def log_admin_activity(admin_id, action):
    try:
        log_activity(action, admin_id=admin_id)
    except SQLAlchemyError:
        current_app.logger.exception("Error logging admin activity")
        db.session.rollback()
        return False
    return True


# ---------- User management ---------- #

def list_users(role=None):
    roles = [role] if role else list(ACCOUNT_MODELS)
    users = []
    for r in roles:
        users.extend(a.to_dict() for a in ACCOUNT_MODELS[r].query.all())
    return newest_first(users)


def get_account(role, account_id):
    model = ACCOUNT_MODELS.get(role)
    account = db.session.get(model, account_id) if model else None
    if account is None:
        raise UserManagementError("User not found.")
    return account


def _ensure_unique(model, username, nim_nip=None, exclude_id=None):
    conditions = [model.username == username]
    if nim_nip is not None and hasattr(model, 'nim_nip'):
        conditions.append(model.nim_nip == nim_nip)
    query = model.query.filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        raise UserManagementError(DUPLICATE_ACCOUNT)


def _commit_account():
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise UserManagementError(DUPLICATE_ACCOUNT) from e


def create_user(name, nim_nip, username, role, password, admin_id=None):
    if role not in CREATABLE_ROLES:
        raise UserManagementError("Please select a role.")

    model = ACCOUNT_MODELS[role]
    _ensure_unique(model, username, nim_nip)

    account = model(name=name, nim_nip=nim_nip, username=username)
    account.set_password(password)
    db.session.add(account)
    _commit_account()
    current_app.logger.info("Created %s account %s", role, username)

    if admin_id:
        log_admin_activity(admin_id, f"Created new {role} account for {name} ({username})")
    return account


def update_user(role, account_id, name, identifier, username, password=None, admin_id=None):
    account = get_account(role, account_id)
    model = type(account)
    _ensure_unique(model, username, identifier, exclude_id=account.id)

    account.name = name
    account.username = username
    if hasattr(account, 'nim_nip') and identifier:
        account.nim_nip = identifier
    if password:
        account.set_password(password)
    _commit_account()
    current_app.logger.info("Updated %s account %s", role, account_id)

    if admin_id:
        log_admin_activity(admin_id, f"Updated {role} account for {name} ({username})")
    return account


def delete_user(role, account_id, admin_id=None):
    account = get_account(role, account_id)
    if role == 'admin' and account.id == admin_id:
        raise UserManagementError("You cannot delete your own account.")

    has_reports = role == 'user' and any(
        model.query.filter_by(user_id=account.id).first() is not None
        for model in REPORT_MODELS.values()
    )
    column = {'user': ActivityLog.user_id, 'security': ActivityLog.security_id, 'admin': ActivityLog.admin_id}[role]
    has_logs = ActivityLog.query.filter(column == account.id).first() is not None
    if has_reports or has_logs:
        raise UserManagementError("This user has associated records and cannot be deleted.")

    name, username = account.name, account.username
    db.session.delete(account)
    db.session.commit()
    current_app.logger.info("Deleted %s account %s", role, account_id)

    if admin_id:
        log_admin_activity(admin_id, f"Deleted {role} account for {name} ({username})")
    return True
