"""Display-name conventions for check methods.

Methods named ``is_<property>`` read as "to be <property>" and methods named
``<verb>s(...)`` read as "to <verb> ...". The transforms below only affect
the text of diagnostic messages, never which method gets called.
"""

HAS_MARKER = "has"
STATE_PREFIX = "is_"
PLURAL_SUFFIX = "s"


def property_name(method_name: str) -> str:
    """Strip a leading ``is_`` from a zero-argument predicate name."""
    if method_name.startswith(STATE_PREFIX):
        return method_name[len(STATE_PREFIX) :]
    return method_name


def verb_name(method_name: str) -> str:
    """Strip a single trailing ``s`` from a multi-argument predicate name."""
    if method_name.endswith(PLURAL_SUFFIX):
        return method_name[: -len(PLURAL_SUFFIX)]
    return method_name
