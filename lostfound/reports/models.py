from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import declared_attr, synonym
from lostfound import db
from lostfound.reports.status import allowed_next_statuses, is_editable


def _now_utc():
    return datetime.now(timezone.utc)


class ReportMixin:
    """Columns shared by the lost and found tables.

    Both tables keep their own date column (``lost_date`` / ``found_date``);
    ``event_date`` is a synonym so queries can treat them alike.
    """

    report_type = None

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='reported', index=True)
    image = db.Column(db.String(2000), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_now_utc, nullable=False, index=True)

    @declared_attr
    def user_id(cls):
        return db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    @declared_attr
    def reporter(cls):
        return db.relationship('User', back_populates=cls.__tablename__, lazy='joined')

    @declared_attr
    def __table_args__(cls):
        return (
            Index(f'ix_{cls.__tablename__}_status_created', 'status', 'created_at'),
            CheckConstraint(
                "status IN ('reported', 'verified', 'matched', 'returned')",
                name=f'ck_{cls.__tablename__}_valid_status'
            ),
        )

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id} name={self.name!r} status={self.status}>"

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.report_type,
            'user_id': self.user_id,
            'name': self.name,
            'category': self.category,
            'description': self.description,
            'location': self.location,
            'date': self.event_date.isoformat() if self.event_date else None,
            'status': self.status,
            'image': self.image,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'reporter_name': self.reporter.name if self.reporter else 'Unknown User',
            'editable': is_editable(self.status),
            'allowed_next_statuses': allowed_next_statuses(self.status),
        }


class LostItem(ReportMixin, db.Model):
    __tablename__ = 'lost_items'
    report_type = 'lost'

    lost_date = db.Column(db.Date, nullable=False)
    event_date = synonym('lost_date')


class FoundItem(ReportMixin, db.Model):
    __tablename__ = 'found_items'
    report_type = 'found'

    found_date = db.Column(db.Date, nullable=False)
    event_date = synonym('found_date')


REPORT_MODELS = {
    'lost': LostItem,
    'found': FoundItem,
}
