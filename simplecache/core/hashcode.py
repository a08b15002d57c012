"""Fast, non-cryptographic 32-bit fingerprints used to build cache keys.

The string hash is the classic ``h = h * 31 + c`` recurrence over UTF-16 code
units, truncated to a signed 32-bit integer after every step. It reproduces
``String.hashCode`` bit for bit, so keys are stable across processes as long
as the hashed text is. Collisions are possible and accepted.
"""

from __future__ import annotations

import inspect
import logging
import re
import struct
from functools import partial
from types import CodeType
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_UNDEFINED = object()
_WHITESPACE = re.compile(r"\s")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def of_string(s: Any) -> int:
    """Hash a string. Non-string input hashes to ``0``."""
    if not isinstance(s, str):
        return 0

    h = 0
    for (unit,) in struct.iter_unpack("<H", s.encode("utf-16-le")):
        h = _to_int32(h * 31 + unit)
    return h


def of(value: Any = _UNDEFINED) -> int:
    """Hash any value through its textual representation.

    ``None`` hashes like ``"null"``, a call without argument like
    ``"undefined"`` and an empty list or tuple like ``"[]"``. Values whose
    type has no usable ``__str__`` fall through to :func:`of_string` and
    therefore hash to ``0``.
    """
    if value is None:
        return of_string("null")
    if value is _UNDEFINED:
        return of_string("undefined")
    if isinstance(value, (list, tuple)) and len(value) == 0:
        return of_string("[]")
    if callable(getattr(type(value), "__str__", None)):
        return of_string(str(value))
    return of_string(value)


def _strip(text: str) -> str:
    return _WHITESPACE.sub("", text)


def _source_of(obj: Any) -> Optional[str]:
    try:
        return inspect.getsource(obj)
    except (OSError, TypeError):
        # builtins, C extensions, partials and REPL definitions carry no source
        return None


def _code_fingerprint(code: CodeType) -> str:
    consts = ",".join(
        _code_fingerprint(c) if isinstance(c, CodeType) else repr(c) for c in code.co_consts
    )
    return f"{code.co_code.hex()}|{consts}|{code.co_names}|{code.co_varnames}"


def _state_of(obj: Any) -> str:
    if inspect.isclass(obj):
        return f"{obj.__module__}.{obj.__qualname__}"
    if hasattr(obj, "__dict__"):
        return repr(sorted(vars(obj).items()))
    return repr(obj)


def _identity_of(f: Any) -> str:
    """Text identifying a callable; whitespace-insensitive where source exists."""
    if isinstance(f, partial):
        keywords = sorted(f.keywords.items())
        return f"partial({_identity_of(f.func)}|{f.args!r}|{keywords!r})"

    if not inspect.isroutine(f) and not inspect.isclass(f):
        # callable instance: its class, its __call__ and its state
        cls = type(f)
        call_source = _source_of(cls.__call__) or ""
        return f"{cls.__module__}.{cls.__qualname__}:{_strip(call_source)}@{_state_of(f)}"

    code = getattr(f, "__code__", None)
    source = _source_of(f)
    if source is not None:
        text = _strip(source)
        # getsource yields whole lines, which may hold several lambdas
        if code is not None and code.co_name == "<lambda>":
            text = f"{text}|{_code_fingerprint(code)}"
    elif code is not None:
        text = f"{getattr(f, '__qualname__', '')}|{_code_fingerprint(code)}"
        logger.debug("No source available for %r, hashing its bytecode instead", f)
    else:
        text = f"{getattr(f, '__module__', '')}.{getattr(f, '__qualname__', '')}"
        logger.debug("No source available for %r, hashing %s instead", f, text)

    if inspect.ismethod(f):
        text = f"{text}@{_state_of(f.__self__)}"
    return text


def of_function(f: Callable[..., Any]) -> int:
    """Hash a function by its name and whitespace-stripped source.

    Reformatting a function keeps its hash; renaming it does not. Lambdas
    also fold in their bytecode, partials their target and bound
    arguments, and bound methods and callable instances their state.
    """
    name = getattr(f, "__name__", "") or ""
    if name == "<lambda>":
        name = ""
    return of_string(f"{name}:{_identity_of(f)}")
