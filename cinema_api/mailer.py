# cinema_api/mailer.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

logger = logging.getLogger(__name__)

USER_WELCOME_TEMPLATE = "user_welcome"
TOKEN_ACTIVATION_TEMPLATE = "token_activation"


class AbstractMailer(ABC):
    """Delivers templated messages to users (welcome mail, activation tokens)."""

    @abstractmethod
    async def send(self, recipient: str, template: str, data: Dict[str, Any]) -> None:
        pass


class LoggingMailer(AbstractMailer):
    """Mailer that only records what would have been sent."""

    async def send(self, recipient: str, template: str, data: Dict[str, Any]) -> None:
        logger.info(f"Mailer: would send '{template}' to {recipient}.")
        # Template data can hold token plaintexts, keep it out of INFO logs
        logger.debug(f"Mailer: '{template}' payload keys: {sorted(data)}; data: {data}")


_mailer_instance: AbstractMailer = LoggingMailer()


def get_mailer() -> AbstractMailer:
    """Dependency provider for the configured mailer."""
    return _mailer_instance
