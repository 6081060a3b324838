"""
Tests for StoreOutgoingMailListener: attribute extraction and model associations.
"""

import json

import pytest
from django.core.mail import EmailMessage

from sends.crypto import encrypt
from sends.events import MessageSent
from sends.exceptions import DecryptionError, InvalidModelsHeader, SendableNotFound
from sends.listeners import StoreOutgoingMailListener, get_addresses_value
from sends.models import Send, Sendable

pytestmark = pytest.mark.django_db


def models_header(*references):
    return encrypt(json.dumps(list(references)))


def uppercase_subject(event, attributes):
    return {**attributes, 'subject': attributes['subject'].upper()}


class TestSendAttributes:
    """A Send row is built from the message and its headers."""

    def test_message_without_sends_headers_creates_one_send(self, make_event):
        send = StoreOutgoingMailListener().handle(make_event())

        assert Send.objects.count() == 1
        assert send.uuid is None
        assert send.mail_class is None
        assert send.subject == 'Welcome'
        assert send.sent_at is not None
        assert Sendable.objects.count() == 0

    def test_addresses_keep_order_and_null_empty_names(self, make_event):
        event = make_event(
            from_email='Alice <a@x.com>, b@x.com',
            to=['Bob <bob@x.com>', 'carol@x.com'],
            reply_to=['Support <help@x.com>'],
            bcc=['Audit <audit@x.com>'],
        )

        send = StoreOutgoingMailListener().handle(event)
        send.refresh_from_db()

        assert send.from_address == {'a@x.com': 'Alice', 'b@x.com': None}
        assert list(send.from_address) == ['a@x.com', 'b@x.com']
        assert send.to == {'bob@x.com': 'Bob', 'carol@x.com': None}
        assert send.reply_to == {'help@x.com': 'Support'}
        assert send.bcc == {'audit@x.com': 'Audit'}

    def test_address_headers_override_message_attributes(self, make_event):
        event = make_event(
            from_email='shop@example.com',
            to=['bob@example.com'],
            bcc=['audit@example.com'],
            headers={
                'From': 'Billing <billing@example.com>',
                'to': 'Team <team@example.com>, ops@example.com',
                'Cc': 'Manager <manager@example.com>',
                'Reply-To': 'Support <help@example.com>',
            },
        )

        send = StoreOutgoingMailListener().handle(event)
        send.refresh_from_db()

        assert send.from_address == {'billing@example.com': 'Billing'}
        assert send.to == {'team@example.com': 'Team', 'ops@example.com': None}
        assert send.cc == {'manager@example.com': 'Manager'}
        assert send.reply_to == {'help@example.com': 'Support'}
        assert send.bcc == {'audit@example.com': None}

    def test_empty_address_lists_are_stored_as_null(self, make_event):
        event = make_event(cc=[], bcc=[])
        event.message.from_email = ''

        send = StoreOutgoingMailListener().handle(event)
        send.refresh_from_db()

        assert send.from_address is None
        assert send.cc is None
        assert send.bcc is None
        assert send.reply_to is None

    def test_get_addresses_value(self):
        assert get_addresses_value([('a@x.com', 'Alice'), ('b@x.com', '')]) == {'a@x.com': 'Alice', 'b@x.com': None}
        assert get_addresses_value([]) is None

    def test_content_is_not_stored_by_default(self, make_event):
        send = StoreOutgoingMailListener().handle(make_event(html='<p>Secret</p>'))

        assert send.content is None

    def test_content_is_html_body_when_enabled(self, make_event, configure_sends):
        configure_sends(STORE_CONTENT=True)

        send = StoreOutgoingMailListener().handle(make_event(html='<p>Hello</p>'))

        assert send.content == '<p>Hello</p>'

    def test_content_from_html_only_message(self, configure_sends):
        configure_sends(STORE_CONTENT=True)
        message = EmailMessage('Invoice', '<h1>Invoice</h1>', 'billing@x.com', ['bob@x.com'])
        message.content_subtype = 'html'

        send = StoreOutgoingMailListener().handle(MessageSent(message))

        assert send.content == '<h1>Invoice</h1>'

    def test_content_is_null_for_plain_text_message(self, make_event, configure_sends):
        configure_sends(STORE_CONTENT=True)

        send = StoreOutgoingMailListener().handle(make_event())

        assert send.content is None

    def test_uuid_read_from_header(self, make_event):
        send = StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Message-ID': 'order-42'}))

        assert send.uuid == 'order-42'

    def test_header_names_are_case_insensitive(self, make_event):
        send = StoreOutgoingMailListener().handle(make_event(headers={'x-sends-message-id': 'order-43'}))

        assert send.uuid == 'order-43'

    def test_empty_uuid_header_is_null(self, make_event):
        send = StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Message-ID': ''}))

        assert send.uuid is None

    def test_message_id_header_name_uses_transport_id(self, make_event, configure_sends):
        configure_sends(HEADERS={'SEND_UUID': 'Message-ID'})
        event = make_event(headers={'Message-ID': '<custom@example.com>'}, message_id='transport-7@example.com')

        send = StoreOutgoingMailListener().handle(event)

        assert send.uuid == 'transport-7@example.com'

    def test_mail_class_is_decrypted(self, make_event):
        event = make_event(headers={'X-Sends-Mail-Class': encrypt('shop.emails.OrderShipped')})

        send = StoreOutgoingMailListener().handle(event)

        assert send.mail_class == 'shop.emails.OrderShipped'

    def test_undecryptable_mail_class_raises(self, make_event):
        event = make_event(headers={'X-Sends-Mail-Class': 'not-a-token'})

        with pytest.raises(DecryptionError):
            StoreOutgoingMailListener().handle(event)
        assert Send.objects.count() == 0

    def test_custom_header_names(self, make_event, configure_sends):
        configure_sends(HEADERS={'MAIL_CLASS': 'X-App-Mail'})
        event = make_event(headers={'X-App-Mail': encrypt('app.Welcome')})

        send = StoreOutgoingMailListener().handle(event)

        assert send.mail_class == 'app.Welcome'

    def test_attributes_hook_argument(self, make_event):
        send = StoreOutgoingMailListener(attributes_hook=uppercase_subject).handle(make_event())

        assert send.subject == 'WELCOME'

    def test_attributes_hook_from_settings(self, make_event, configure_sends):
        configure_sends(ATTRIBUTES_HOOK='tests.test_listener.uppercase_subject')

        send = StoreOutgoingMailListener().handle(make_event())

        assert send.subject == 'WELCOME'


class TestModelAssociations:
    """Models listed in the models header are linked to the Send."""

    def test_model_with_sends_is_attached(self, make_event, user):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 'core.user', 'id': user.pk})})

        send = StoreOutgoingMailListener().handle(event)

        sendable = Sendable.objects.get()
        assert sendable.send == send
        assert sendable.content_object == user
        assert list(user.sends.all()) == [send]

    def test_model_label_is_case_insensitive(self, make_event, user):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 'core.User', 'id': user.pk})})

        StoreOutgoingMailListener().handle(event)

        assert Sendable.objects.count() == 1

    def test_model_without_sends_is_skipped(self, make_event, group):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 'auth.group', 'id': group.pk})})

        StoreOutgoingMailListener().handle(event)

        assert Send.objects.count() == 1
        assert Sendable.objects.count() == 0

    def test_mixed_references_only_attach_supported_models(self, make_event, user, group):
        header = models_header(
            {'model': 'auth.group', 'id': group.pk},
            {'model': 'core.user', 'id': user.pk},
        )

        StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Models': header}))

        assert Sendable.objects.count() == 1
        assert Sendable.objects.get().object_id == user.pk

    def test_duplicate_reference_is_attached_once(self, make_event, user):
        header = models_header({'model': 'core.user', 'id': user.pk}, {'model': 'core.user', 'id': user.pk})

        StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Models': header}))

        assert Sendable.objects.count() == 1

    def test_missing_model_raises_after_send_is_stored(self, make_event, user):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 'core.user', 'id': user.pk + 100})})

        with pytest.raises(SendableNotFound) as excinfo:
            StoreOutgoingMailListener().handle(event)

        assert excinfo.value.pk == user.pk + 100
        assert Send.objects.count() == 1
        assert Sendable.objects.count() == 0

    def test_missing_model_is_skipped_when_configured(self, make_event, configure_sends, user):
        configure_sends(IGNORE_MISSING_MODELS=True)
        header = models_header({'model': 'core.user', 'id': user.pk + 100}, {'model': 'core.user', 'id': user.pk})

        StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Models': header}))

        assert Sendable.objects.count() == 1

    def test_unknown_model_label_raises_lookup_error(self, make_event):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 'shop.order', 'id': 1})})

        with pytest.raises(LookupError):
            StoreOutgoingMailListener().handle(event)

    def test_malformed_json_raises_after_send_is_stored(self, make_event):
        event = make_event(headers={'X-Sends-Models': encrypt('[{"model": "core.user", "id": 1')})

        with pytest.raises(json.JSONDecodeError):
            StoreOutgoingMailListener().handle(event)

        assert Send.objects.count() == 1

    def test_models_header_must_be_a_list(self, make_event):
        event = make_event(headers={'X-Sends-Models': encrypt('{"model": "core.user", "id": 1}')})

        with pytest.raises(InvalidModelsHeader):
            StoreOutgoingMailListener().handle(event)

    def test_reference_without_id_is_invalid(self, make_event):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 'core.user'})})

        with pytest.raises(InvalidModelsHeader):
            StoreOutgoingMailListener().handle(event)

    def test_undecryptable_models_header_raises(self, make_event):
        with pytest.raises(DecryptionError):
            StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Models': 'garbage'}))

    def test_empty_models_list_attaches_nothing(self, make_event):
        StoreOutgoingMailListener().handle(make_event(headers={'X-Sends-Models': models_header()}))

        assert Send.objects.count() == 1
        assert Sendable.objects.count() == 0

    def test_non_string_model_label_is_invalid(self, make_event):
        event = make_event(headers={'X-Sends-Models': models_header({'model': 5, 'id': 1})})

        with pytest.raises(InvalidModelsHeader):
            StoreOutgoingMailListener().handle(event)

    def test_duplicate_references_count_once(self, make_event, user):
        header = models_header({'model': 'core.user', 'id': user.pk}, {'model': 'core.User', 'id': user.pk})
        event = make_event(headers={'X-Sends-Models': header})
        listener = StoreOutgoingMailListener()
        send = listener.create_send(event)

        assert listener.attach_models(event, send) == 1
        assert Sendable.objects.count() == 1
