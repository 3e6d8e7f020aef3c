"""Identifier generation for records and attachments."""
# dentalcare/ids.py

import time


class IdGenerator:
    """Issues prefixed, clock-derived identifiers that never repeat.

    Ids look like `p1718000000123456`: the prefix followed by a microsecond
    timestamp. Each stamp is forced above the previous one, so two calls in
    the same microsecond (or a clock step backwards) still yield distinct ids.

    Args:
        prefix (str): Entity prefix, e.g. 'p' for patients.
        clock (callable, optional): Returns nanoseconds; defaults to `time.time_ns`.
    """

    def __init__(self, prefix, clock=time.time_ns):
        self.prefix = prefix
        self._clock = clock
        self._last = 0

    def __call__(self, taken=()) -> str:
        """Returns a new id that is not in `taken`."""
        stamp = max(self._clock() // 1000, self._last + 1)
        while f"{self.prefix}{stamp}" in taken:
            stamp += 1
        self._last = stamp
        return f"{self.prefix}{stamp}"
