import logging

from django.core.exceptions import ImproperlyConfigured
from django.core.mail import get_connection
from django.core.mail.backends.base import BaseEmailBackend
from django.utils.module_loading import import_string

from . import conf
from .events import MessageSent
from .signals import message_sent

logger = logging.getLogger(__name__)


class RecordingEmailBackend(BaseEmailBackend):
    """
    Email backend that delivers through SENDS['EMAIL_BACKEND'] and fires
    ``message_sent`` for every message the inner backend accepted.

    Set EMAIL_BACKEND = 'sends.backends.RecordingEmailBackend' to record
    all mail sent by the project.
    """

    def __init__(self, fail_silently=False, **kwargs):
        super().__init__(fail_silently=fail_silently)
        backend = conf.get_setting('EMAIL_BACKEND')
        backend_class = import_string(backend) if isinstance(backend, str) else backend
        if issubclass(backend_class, RecordingEmailBackend):
            raise ImproperlyConfigured("SENDS['EMAIL_BACKEND'] must name the delivering backend, not RecordingEmailBackend")
        self.connection = get_connection(backend, fail_silently=fail_silently, **kwargs)

    def open(self):
        return self.connection.open()

    def close(self):
        return self.connection.close()

    def send_messages(self, email_messages):
        if not email_messages:
            return 0

        delivered = []
        new_conn_created = self.open()
        try:
            for message in email_messages:
                message_id = ensure_message_id(message)
                if not self.connection.send_messages([message]):
                    logger.warning(f"Message {message_id} was not accepted by the mail backend")
                    continue
                delivered.append(MessageSent(message, message_id=message_id))
        finally:
            if new_conn_created:
                self.close()

        # Recording runs after the whole batch is delivered; the first failure is raised at the end
        first_error = None
        for event in delivered:
            try:
                message_sent.send(sender=self.__class__, event=event)
            except Exception as exc:
                logger.error(f"❌ Recording message {event.message_id} failed: {exc}")
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error
        return len(delivered)


def ensure_message_id(message):
    """
    Fix the Message-ID of ``message`` before delivery so the recorded id is
    the one the recipient sees. Returns it without angle brackets.
    """
    for key, value in (message.extra_headers or {}).items():
        if key.lower() == 'message-id':
            return str(value).strip().strip('<>')

    # Rendering lets Django generate the id for the configured DNS name
    message_id = str(message.message()['Message-ID'])
    message.extra_headers = {**(message.extra_headers or {}), 'Message-ID': message_id}
    return message_id.strip().strip('<>')
