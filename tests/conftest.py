"""Pytest configuration and fixtures."""
import pytest
from django.contrib.auth.models import Group
from django.core.mail import EmailMultiAlternatives

from sends.events import MessageSent


@pytest.fixture(autouse=True)
def sends_settings(settings):
    """Record mail through the recording backend, delivering to the locmem outbox."""
    settings.EMAIL_BACKEND = 'sends.backends.RecordingEmailBackend'
    settings.SENDS = {
        'EMAIL_BACKEND': 'django.core.mail.backends.locmem.EmailBackend',
        'ENCRYPTION_KEY': 'test-encryption-key',
    }
    return settings


@pytest.fixture
def configure_sends(sends_settings):
    """Merge extra keys into settings.SENDS for one test."""
    def _configure(**values):
        sends_settings.SENDS = {**sends_settings.SENDS, **values}
    return _configure


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='alice', email='alice@example.com')


@pytest.fixture
def group(db):
    return Group.objects.create(name='staff')


@pytest.fixture
def make_event():
    """Build a MessageSent around an EmailMultiAlternatives."""
    def _make(headers=None, message_id='transport-1@example.com', html=None, **kwargs):
        kwargs.setdefault('subject', 'Welcome')
        kwargs.setdefault('body', 'Hello there')
        kwargs.setdefault('from_email', 'Alice <alice@example.com>')
        kwargs.setdefault('to', ['bob@example.com'])
        message = EmailMultiAlternatives(headers=headers or {}, **kwargs)
        if html is not None:
            message.attach_alternative(html, 'text/html')
        return MessageSent(message, message_id=message_id)
    return _make
