# Auto Catalog - REST/GraphQL backend for a vehicle catalogue
# Copyright (C) 2025-2026 Olga Kalinina

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.

"""Отправка уведомлений по почте через SMTP."""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from infrastructure.logging.logger import setup_logger
from settings import Settings, settings as default_settings

logger = setup_logger("mail_service")


class MailService:
    """
    Отправляет HTML-письма администратору каталога.

    Ошибки SMTP только логируются и не пробрасываются.
    """

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.activated = config.MAIL_ACTIVATED
        self.host = config.MAIL_HOST
        self.port = config.MAIL_PORT
        self.sender = config.MAIL_FROM
        self.recipient = config.MAIL_TO
        self.timeout = config.MAIL_TIMEOUT

    def sendmail(self, subject: str, body: str) -> bool:
        """
        Отправляет письмо.

        Returns:
            True если письмо ушло, False если почта выключена или SMTP недоступен
        """
        if not self.activated:
            logger.debug(f"[mail] Почта выключена, письмо '{subject}' не отправлено")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = self.recipient
        msg.attach(MIMEText(body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.sendmail(self.sender, [self.recipient], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"[mail] Ошибка отправки письма на {self.host}:{self.port}: {e}")
            return False

        logger.info(f"[mail] Письмо '{subject}' отправлено на {self.recipient}")
        return True
