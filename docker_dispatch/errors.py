class DispatchError(Exception):
    pass


class LabelNotFound(DispatchError, LookupError):
    def __init__(self, key, missing=None, labels=None):
        self.key = key
        self.missing = missing or [key]
        # whatever was found before failing, see get_labels
        self.labels = labels if labels is not None else {}
        super().__init__('Label not found: {}'.format(key))


class LabelParseError(DispatchError, ValueError):
    def __init__(self, key, value, kind):
        self.key = key
        self.value = value
        self.kind = kind
        super().__init__('Label {} is not a valid {}: {!r}'.format(
            key, kind, value))


class OrchestratorQueryError(DispatchError):
    pass
