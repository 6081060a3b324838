"""
Helpers for putting sends metadata on outgoing messages.

    message = SendableEmailMessage(subject, text, to=[user.email])
    message.attach_alternative(html, 'text/html')
    message.store_class_name().associate_with(user, order)
    message.send()
"""

import json
import uuid

from django.core.mail import EmailMultiAlternatives

from . import conf
from .crypto import decrypt, encrypt


class StoresSends:
    """Mixin for EmailMessage subclasses"""

    def _set_sends_header(self, key, value):
        self.extra_headers = {**(self.extra_headers or {}), conf.header_name(key): value}

    def _get_sends_header(self, key):
        wanted = conf.header_name(key).lower()
        for name, value in (self.extra_headers or {}).items():
            if name.lower() == wanted:
                return value
        return None

    def store_class_name(self, name=None):
        if name is None:
            name = f"{type(self).__module__}.{type(self).__qualname__}"
        self._set_sends_header('MAIL_CLASS', encrypt(name))
        return self

    def associate_with(self, *instances):
        references = []
        existing = self._get_sends_header('MODELS')
        if existing:
            references = json.loads(decrypt(existing))

        for item in instances:
            items = item if isinstance(item, (list, tuple, set)) or hasattr(item, 'iterator') else [item]
            for instance in items:
                references.append({'model': instance._meta.label_lower, 'id': instance.pk})

        self._set_sends_header('MODELS', encrypt(json.dumps(references)))
        return self

    def attach_send_uuid(self, value=None):
        if conf.header_name('SEND_UUID') == conf.MESSAGE_ID:
            return None

        value = str(value or uuid.uuid4())
        self._set_sends_header('SEND_UUID', value)
        return value


class SendableEmailMessage(StoresSends, EmailMultiAlternatives):
    pass
