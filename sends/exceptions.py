class SendsError(Exception):
    """Base class for errors raised while recording outgoing mail"""


class DecryptionError(SendsError):
    """A sends header could not be decrypted with the configured key"""


class InvalidModelsHeader(SendsError, ValueError):
    """The decrypted models header is valid JSON but not a list of {model, id} objects"""


class SendableNotFound(SendsError, LookupError):
    """A model referenced in the models header does not exist"""

    def __init__(self, label, pk):
        self.label = label
        self.pk = pk
        super().__init__(f"{label} with id {pk!r} referenced by outgoing mail does not exist")
