from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Index
from werkzeug.security import check_password_hash, generate_password_hash
from lostfound import db


def _now_utc():
    return datetime.now(timezone.utc)


class AccountMixin:
    """Columns and helpers shared by the three credential tables."""

    role = None

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_now_utc, nullable=False, index=True)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id} username={self.username!r}>"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.username,
            'username': self.username,
            'identifier': getattr(self, 'nim_nip', None),
            'role': self.role,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def to_session(self):
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'role': self.role,
        }


class User(AccountMixin, db.Model):
    __tablename__ = 'users'
    role = 'user'

    nim_nip = db.Column(db.String(50), unique=True, nullable=False, index=True)

    lost_items = db.relationship('LostItem', back_populates='reporter', lazy='select')
    found_items = db.relationship('FoundItem', back_populates='reporter', lazy='select')
    activity_logs = db.relationship('ActivityLog', back_populates='user', lazy='select')


class SecurityStaff(AccountMixin, db.Model):
    __tablename__ = 'security_staff'
    role = 'security'

    nim_nip = db.Column(db.String(50), unique=True, nullable=False, index=True)

    activity_logs = db.relationship('ActivityLog', back_populates='security', lazy='select')


class Admin(AccountMixin, db.Model):
    __tablename__ = 'admins'
    role = 'admin'

    activity_logs = db.relationship('ActivityLog', back_populates='admin', lazy='select')


ACCOUNT_MODELS = {
    'user': User,
    'security': SecurityStaff,
    'admin': Admin,
}


class ActivityLog(db.Model):
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    action = db.Column(db.Text, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    security_id = db.Column(db.Integer, db.ForeignKey('security_staff.id'), nullable=True, index=True)
    admin_id = db.Column(db.Integer, db.ForeignKey('admins.id'), nullable=True, index=True)
    timestamp = db.Column(db.DateTime(timezone=True), default=_now_utc, nullable=False)

    user = db.relationship('User', back_populates='activity_logs', lazy='joined')
    security = db.relationship('SecurityStaff', back_populates='activity_logs', lazy='joined')
    admin = db.relationship('Admin', back_populates='activity_logs', lazy='joined')

    __table_args__ = (
        Index('ix_activity_logs_timestamp', 'timestamp'),
        CheckConstraint(
            "(CASE WHEN user_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN security_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN admin_id IS NULL THEN 0 ELSE 1 END) <= 1",
            name='ck_activity_logs_single_actor'
        ),
    )

    def __repr__(self):
        return f"<ActivityLog id={self.id} action={self.action!r}>"

    @property
    def performer_name(self):
        for actor in (self.user, self.security, self.admin):
            if actor is not None:
                return actor.name
        return 'System'

    def to_dict(self):
        return {
            'id': self.id,
            'action': self.action,
            'item_name': '-',
            'user_name': self.performer_name,
            'created_at': self.timestamp.isoformat() if self.timestamp else None,
        }


def authenticate(username, password, role):
    """Return the account matching the credentials for ``role``, or None."""
    model = ACCOUNT_MODELS.get(role)
    if model is None:
        return None
    account = model.query.filter_by(username=username).first()
    if account is None or not account.check_password(password):
        return None
    return account
