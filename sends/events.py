from email.utils import getaddresses

from django.core.mail import EmailMultiAlternatives


class MessageSent:
    """
    A message the mail backend has delivered.

    Wraps the Django ``EmailMessage`` that was sent together with the
    Message-ID the transport used for it.
    """

    def __init__(self, message, message_id=None):
        self.message = message
        self.message_id = message_id

    @property
    def headers(self):
        return self.message.extra_headers or {}

    def has_header(self, name):
        return self.get_header(name) is not None

    def get_header(self, name):
        """Raw header value as a string, or None. Header names are case-insensitive."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return None if value is None else str(value)
        return None

    @property
    def subject(self):
        return self.message.subject or ''

    @property
    def html_body(self):
        if isinstance(self.message, EmailMultiAlternatives):
            for alternative in self.message.alternatives:
                if alternative[1] == 'text/html':
                    return alternative[0]
        if getattr(self.message, 'content_subtype', None) == 'html':
            return self.message.body
        return None

    def get_from(self):
        return _parse_addresses(self._header_or('From', [self.message.from_email]))

    def get_reply_to(self):
        return _parse_addresses(self._header_or('Reply-To', self.message.reply_to))

    def get_to(self):
        return _parse_addresses(self._header_or('To', self.message.to))

    def get_cc(self):
        return _parse_addresses(self._header_or('Cc', self.message.cc))

    def get_bcc(self):
        return _parse_addresses(self.message.bcc)

    def _header_or(self, name, default):
        """Django renders From/To/Cc/Reply-To from extra_headers when they are set"""
        value = self.get_header(name)
        return default if value is None else [value]


def _parse_addresses(values):
    """List of (address, display name) pairs from Django address strings"""
    values = [str(value) for value in (values or []) if value]
    return [(address, name) for name, address in getaddresses(values) if address]
