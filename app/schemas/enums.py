from enum import Enum

class Role(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"

class Action(str, Enum):
    share_location = "share_location"
    view_locations = "view_locations"
    broadcast = "broadcast"
    manage_users = "manage_users"
    check_weather = "check_weather"

class NotificationType(str, Enum):
    info = "info"
    announcement = "announcement"
    typhoon = "typhoon"

class AlertSeverity(str, Enum):
    success = "success"
    warning = "warning"

class PositionErrorCode(str, Enum):
    permission_denied = "permission_denied"
    position_unavailable = "position_unavailable"
    timeout = "timeout"
