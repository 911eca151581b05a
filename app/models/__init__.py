from app.models.member import Member, Role
from app.models.contribution import Contribution, ContributionStatus
from app.models.announcement import Announcement, Priority
from app.models.chat import ChatMessage
from app.models.admin_log import AdminActionLog, AdminAction
