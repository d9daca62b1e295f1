"""Validators shared by submission models.

Form posts send every input, so an untouched optional field arrives as an
empty string; JSON clients omit it or send null. Both end up as ``None``.
"""


def blank_to_none(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value
