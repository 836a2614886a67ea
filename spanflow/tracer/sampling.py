"""Sampling priority values carried by a trace."""

from enum import IntEnum
from typing import Optional


class SamplingPriority(IntEnum):
    """
    Retention directive for the collection backend.

    An unset priority is represented by None, not by AUTO_REJECT.
    """

    USER_REJECT = -1
    AUTO_REJECT = 0
    AUTO_KEEP = 1
    USER_KEEP = 2

    @classmethod
    def parse(cls, value) -> Optional["SamplingPriority"]:
        """
        Return the priority named by an int, a decimal string or a member name.

        Names match case-insensitively with or without underscores, so
        "UserKeep", "USER_KEEP" and "user_keep" are equivalent.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or value is None:
            return None
        text = str(value).strip()
        try:
            return cls(int(text))
        except ValueError:
            pass
        return _BY_NAME.get(text.replace("_", "").lower())


_BY_NAME = {member.name.replace("_", "").lower(): member for member in SamplingPriority}
