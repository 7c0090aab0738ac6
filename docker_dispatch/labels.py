from .errors import LabelNotFound, LabelParseError

TRUE_VALUES = {'1', 't', 'T', 'true', 'TRUE', 'True'}
FALSE_VALUES = {'0', 'f', 'F', 'false', 'FALSE', 'False'}


def parse_bool(key, value):
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise LabelParseError(key, value, 'boolean')


def parse_int(key, value):
    try:
        return int(value.strip())
    except ValueError:
        raise LabelParseError(key, value, 'integer')


def split_list(value):
    parts = []
    for part in value.split(','):
        part = part.strip()
        if part and part not in parts:
            parts.append(part)
    return parts


def get_label(unit, key):
    try:
        return unit.labels[key]
    except KeyError:
        raise LabelNotFound(key)


def get_labels(unit, keys):
    """Look up several labels at once.

    Raises `LabelNotFound` for the first missing key; the exception's
    ``labels`` attribute still holds every key that was found.
    """
    found = {}
    missing = []

    for key in keys:
        if key in unit.labels:
            found[key] = unit.labels[key]
        else:
            missing.append(key)

    if missing:
        raise LabelNotFound(missing[0], missing=missing, labels=found)

    return found


def get_label_or_default(unit, key, fallback):
    return unit.labels.get(key, fallback)


def get_bool_label_or_default(unit, key, fallback):
    try:
        return parse_bool(key, get_label(unit, key))
    except (LabelNotFound, LabelParseError):
        return fallback


def get_int_label_or_default(unit, key, fallback):
    try:
        return parse_int(key, get_label(unit, key))
    except (LabelNotFound, LabelParseError):
        return fallback
