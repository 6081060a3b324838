"""
Settings for the sends app.

Projects configure the app through a ``SENDS`` dict in their settings; keys
that are left out fall back to ``DEFAULTS``. Values are read on every access
so ``override_settings`` and the pytest-django ``settings`` fixture apply
immediately.
"""

from django.apps import apps
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

# Special header name: use the id assigned by the transport instead of a custom header
MESSAGE_ID = 'Message-ID'

DEFAULTS = {
    'SEND_MODEL': 'sends.Send',
    'HEADERS': {
        'SEND_UUID': 'X-Sends-Message-ID',
        'MAIL_CLASS': 'X-Sends-Mail-Class',
        'MODELS': 'X-Sends-Models',
    },
    'STORE_CONTENT': False,
    'ATTRIBUTES_HOOK': None,
    'IGNORE_MISSING_MODELS': False,
    'ENCRYPTION_KEY': None,
    'EMAIL_BACKEND': 'django.core.mail.backends.smtp.EmailBackend',
}


def get_setting(name):
    user_settings = getattr(settings, 'SENDS', None) or {}
    if name not in DEFAULTS:
        raise ImproperlyConfigured(f"Unknown sends setting: {name}")
    if name == 'HEADERS':
        return {**DEFAULTS['HEADERS'], **user_settings.get('HEADERS', {})}
    return user_settings.get(name, DEFAULTS[name])


def header_name(key):
    """Header name configured for SEND_UUID, MAIL_CLASS or MODELS"""
    return get_setting('HEADERS')[key]


def get_send_model():
    from .models import Send

    label = get_setting('SEND_MODEL')
    try:
        model = apps.get_model(label, require_ready=False)
    except (ValueError, LookupError) as exc:
        raise ImproperlyConfigured(f"SENDS['SEND_MODEL'] refers to model '{label}' that is not installed") from exc

    if not issubclass(model, Send):
        raise ImproperlyConfigured(f"SENDS['SEND_MODEL'] must be sends.Send or a subclass of it, got '{label}'")
    return model


def get_attributes_hook():
    hook = get_setting('ATTRIBUTES_HOOK')
    if isinstance(hook, str):
        return import_string(hook)
    return hook


def get_encryption_secret():
    return get_setting('ENCRYPTION_KEY') or settings.SECRET_KEY
