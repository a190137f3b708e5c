from sqlalchemy import Enum as SAEnum


def _normalize(value):
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().upper()
    return value.value


class CaseInsensitiveEnum(SAEnum):
    """Enum column storing upper-case member values.

    ``"approved"``, ``"APPROVED"`` and ``PaymentStatus.APPROVED`` all bind to
    the same stored value.
    """

    cache_ok = True

    def __init__(self, enum_cls, **kwargs):
        self._enum_cls = enum_cls
        self._enum_kwargs = dict(kwargs)
        kwargs.setdefault("values_callable", lambda members: [m.value for m in members])
        super().__init__(enum_cls, **kwargs)

    def adapt(self, impltype, **kw):
        return CaseInsensitiveEnum(self._enum_cls, **{**self._enum_kwargs, **kw})

    def bind_processor(self, dialect):
        parent = super().bind_processor(dialect)

        def process(value):
            value = _normalize(value)
            return parent(value) if parent and value is not None else value

        return process

    def result_processor(self, dialect, coltype):
        parent = super().result_processor(dialect, coltype)

        def process(value):
            value = _normalize(value) if isinstance(value, str) else value
            return parent(value) if parent and value is not None else value

        return process
