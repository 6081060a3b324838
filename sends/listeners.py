import json
import logging

from django.apps import apps
from django.utils import timezone

from . import conf
from .contracts import SendsRelation, supports_sends
from .crypto import decrypt
from .exceptions import InvalidModelsHeader, SendableNotFound

logger = logging.getLogger(__name__)


class StoreOutgoingMailListener:
    """
    Store a Send for every delivered message and link it to the models named in
    the models header.

    ``attributes_hook(event, attributes)`` may return a changed copy of the
    attributes before the Send is created. Without an explicit hook the one
    configured in SENDS['ATTRIBUTES_HOOK'] is used.
    """

    def __init__(self, attributes_hook=None):
        self.attributes_hook = attributes_hook if attributes_hook is not None else conf.get_attributes_hook()

    def handle(self, event):
        send = self.create_send(event)
        attached = self.attach_models(event, send)

        logger.info(f"📧 Stored send {send.pk} (uuid={send.uuid}, mail_class={send.mail_class}, models={attached})")
        return send

    def create_send(self, event):
        attributes = self.get_default_attributes(event)
        if self.attributes_hook is not None:
            attributes = self.attributes_hook(event, attributes)

        return conf.get_send_model().objects.create(**attributes)

    def get_default_attributes(self, event):
        return {
            'uuid': self.get_send_uuid(event),
            'mail_class': self.get_mail_class(event),
            'subject': event.subject,
            'content': self.get_content(event),
            'from_address': get_addresses_value(event.get_from()),
            'reply_to': get_addresses_value(event.get_reply_to()),
            'to': get_addresses_value(event.get_to()),
            'cc': get_addresses_value(event.get_cc()),
            'bcc': get_addresses_value(event.get_bcc()),
            'sent_at': timezone.now(),
        }

    def get_send_uuid(self, event):
        name = conf.header_name('SEND_UUID')
        if name == conf.MESSAGE_ID:
            return event.message_id

        return event.get_header(name) or None

    def get_mail_class(self, event):
        value = event.get_header(conf.header_name('MAIL_CLASS'))
        if not value:
            return None
        return decrypt(value)

    def get_content(self, event):
        if not conf.get_setting('STORE_CONTENT'):
            return None
        return event.html_body

    def attach_models(self, event, send):
        models = self.get_models(event)
        for instance in models:
            SendsRelation(instance).attach(send)
        return len({(instance._meta.label_lower, instance.pk) for instance in models})

    def get_models(self, event):
        value = event.get_header(conf.header_name('MODELS'))
        if not value:
            return []

        references = json.loads(decrypt(value))
        if not isinstance(references, list):
            raise InvalidModelsHeader("Models header must decode to a JSON list")

        found = []
        for reference in references:
            instance = self.resolve_model(reference)
            if instance is None:
                continue
            if not supports_sends(instance):
                logger.debug(f"Skipping {instance._meta.label} {instance.pk}: model does not support sends")
                continue
            found.append(instance)
        return found

    def resolve_model(self, reference):
        if (not isinstance(reference, dict) or not isinstance(reference.get('model'), str)
                or 'id' not in reference):
            raise InvalidModelsHeader(f"Invalid model reference in models header: {reference!r}")

        model = apps.get_model(reference['model'])
        instance = model._default_manager.filter(pk=reference['id']).first()
        if instance is not None:
            return instance

        if conf.get_setting('IGNORE_MISSING_MODELS'):
            logger.warning(f"⚠️ {model._meta.label} {reference['id']!r} referenced by outgoing mail not found, skipping")
            return None
        raise SendableNotFound(model._meta.label, reference['id'])


def get_addresses_value(addresses):
    """
    Map (address, name) pairs to {address: name or None}, keeping order.
    Returns None instead of an empty dict.
    """
    value = {}
    for address, name in addresses:
        value[address] = name or None
    return value or None
