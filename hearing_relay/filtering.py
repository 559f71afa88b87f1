"""Court-code allow-list filtering.

Usage
-----
>>> allow_list = AllowList(court_codes=frozenset({"B10JQ", "B33HU"}), enabled=True)
>>> allow_list.permits("B10JQ")
True
>>> allow_list.permits("B01CX")
False
>>> AllowList(enabled=False).permits("B01CX")
True

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

COURT_CODE_LENGTH = 5


def should_relay(
    court_code: str,
    allow_list: cabc.Set[str],
    *,
    enabled: bool,
) -> bool:
    """Return True when an event for ``court_code`` should be relayed.

    A disabled allow-list relays everything; an enabled one relays only the
    court codes it contains.
    """
    if not enabled:
        return True
    return court_code in allow_list


@dc.dataclass(frozen=True, slots=True)
class AllowList:
    """Immutable set of court codes permitted to relay, plus its toggle.

    Attributes
    ----------
    court_codes
        Five-character court codes allowed through when ``enabled``.
    enabled
        Whether filtering is active. When False every event is relayed.

    """

    court_codes: frozenset[str] = frozenset()
    enabled: bool = False

    @classmethod
    def from_codes(
        cls, codes: cabc.Iterable[str], *, enabled: bool
    ) -> AllowList:
        """Build an allow-list, dropping blank entries and surrounding spaces."""
        cleaned = frozenset(code.strip() for code in codes if code.strip())
        return cls(court_codes=cleaned, enabled=enabled)

    def permits(self, court_code: str) -> bool:
        """Return True when ``court_code`` may be relayed."""
        return should_relay(court_code, self.court_codes, enabled=self.enabled)


__all__ = ["COURT_CODE_LENGTH", "AllowList", "should_relay"]
