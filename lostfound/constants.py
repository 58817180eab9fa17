ROLES = ('user', 'security', 'admin')
# Roles an admin may create from the user management page
CREATABLE_ROLES = ('user', 'security')

REPORT_TYPES = ('lost', 'found')
REPORT_STATUSES = ('reported', 'verified', 'matched', 'returned')

CATEGORIES = [
    ('electronics', 'Electronics'),
    ('clothing', 'Clothing'),
    ('accessories', 'Accessories'),
    ('documents', 'Documents'),
    ('keys', 'Keys'),
    ('other', 'Other'),
]

NOTIFICATION_TYPES = {'report', 'verification', 'match', 'return'}

NAME_LIMIT = 150
LOCATION_LIMIT = 255
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif'}

DASHBOARD_ENDPOINTS = {
    'user': 'reports.dashboard',
    'security': 'security.dashboard',
    'admin': 'admin.dashboard',
}
