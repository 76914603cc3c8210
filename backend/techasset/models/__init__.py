from .auth import User
from .activity import ActivityLog
from .itcheck import ITCheckEntry, SpeedTest, InstalledApp
from .licenses import SoftwareLicense, SoftwareAddIn
from .passwords import PasswordCategory, PasswordEntry, PasswordCustomField, SecureNote
from .tickets import Ticket, TicketComment, TicketSequence
from .credits import CreditBlock
from .worklogs import ConsultancyLogEntry, InternalLogEntry
from .feedback import FeedbackLink, FeedbackResponse

__all__ = [
    'User', 'ActivityLog',
    'ITCheckEntry', 'SpeedTest', 'InstalledApp',
    'SoftwareLicense', 'SoftwareAddIn',
    'PasswordCategory', 'PasswordEntry', 'PasswordCustomField', 'SecureNote',
    'Ticket', 'TicketComment', 'TicketSequence',
    'CreditBlock',
    'ConsultancyLogEntry', 'InternalLogEntry',
    'FeedbackLink', 'FeedbackResponse',
]
