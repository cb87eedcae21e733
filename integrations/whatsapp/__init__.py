"""WhatsApp gateway integration."""

from .client import WhatsAppAPIError, WhatsAppClient

__all__ = ["WhatsAppAPIError", "WhatsAppClient"]
