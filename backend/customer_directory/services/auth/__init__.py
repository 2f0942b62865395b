from customer_directory.services.auth.dto import AuthResultOut
from customer_directory.services.auth.service import AuthService

__all__ = ["AuthService", "AuthResultOut"]
