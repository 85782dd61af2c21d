from __future__ import annotations

from ._pyisochron import *
from ._pyisochron import (  # for the docs
    __all__,
    __version__,
    _patch_time_frozen,
    _patch_time_keep_ticking,
    _unpatch_time,
    _unpkl_date,
    _unpkl_dt,
    _unpkl_time,
)

from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from typing import Iterator as _Iterator, Union as _Union


@_dataclass
class _TimePatch:
    _pin: DateTime
    _keep_ticking: bool

    def shift(self, unit: _Union[Unit, str], amount: int, /) -> None:
        """Move the patched time by an amount of the given unit"""
        if self._keep_ticking:
            now = DateTime.now()
            self._pin = new = now.add(unit, amount)
            _patch_time_keep_ticking(new)
        else:
            self._pin = new = self._pin.add(unit, amount)
            _patch_time_frozen(new)


@_contextmanager
def patch_current_time(
    dt: DateTime,
    /,
    *,
    keep_ticking: bool,
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * This function should be used only for testing purposes. It is not
      thread-safe or part of the stable API.
    * This function only affects :meth:`DateTime.now`. It does not
      affect the standard library's time functions or any other libraries.
      Use the ``time_machine`` package if you also want to patch other libraries.

    Example
    -------

    >>> from isochron import DateTime, patch_current_time
    >>> d = DateTime(1980, 3, 2, 2)
    >>> with patch_current_time(d, keep_ticking=False) as p:
    ...     assert DateTime.now() == d
    ...     p.shift("hours", 4)
    ...     assert DateTime.now() == d.add("hours", 4)
    ...
    >>> assert DateTime.now() != d
    """
    if keep_ticking:
        _patch_time_keep_ticking(dt)
    else:
        _patch_time_frozen(dt)

    try:
        yield _TimePatch(dt, keep_ticking)
    finally:
        _unpatch_time()
