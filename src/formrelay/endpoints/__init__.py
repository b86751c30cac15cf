from .analytics import create_analytics_handler
from .contact import create_contact_handler

__all__ = ["create_analytics_handler", "create_contact_handler"]
