from .mail_service import MailService

__all__ = ["MailService"]
