from .service import CredentialService

__all__ = ["CredentialService"]
