from .dto import AuthSettings, LoginIn, LoginOut, PrincipalOut, RefreshOut, RegisterIn
from .gates import AuthenticationGate, AuthorizationGate, RequestPrincipal
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthSettings",
    "AuthenticationGate",
    "AuthorizationGate",
    "RequestPrincipal",
    "LoginIn",
    "LoginOut",
    "RefreshOut",
    "RegisterIn",
    "PrincipalOut",
]
