"""
Identity: password hashing, access tokens and account operations.
"""

from scribexx.kernel.identity.password import hash_password, verify_password
from scribexx.kernel.identity.jwt import JWTManager, AccessTokenPayload, create_access_token, verify_access_token
from scribexx.kernel.identity.identity_service import IdentityService

__all__ = [
    "hash_password",
    "verify_password",
    "JWTManager",
    "AccessTokenPayload",
    "create_access_token",
    "verify_access_token",
    "IdentityService",
]
