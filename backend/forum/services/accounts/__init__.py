from .dto import PrincipalOut, ResignIn, SignupIn
from .service import AccountService

__all__ = ["AccountService", "PrincipalOut", "ResignIn", "SignupIn"]
