from .dto import ProfileOut, ProfileUpdateIn
from .service import PASSWORD_HISTORY_SIZE, ProfileService

__all__ = ["PASSWORD_HISTORY_SIZE", "ProfileOut", "ProfileService", "ProfileUpdateIn"]
