"""
gamedice.tests
--------------
Test package initializer for the dice generators.

Notes:
- BBS tests use toy moduli (437, 2077741) so cycles and bit streams can be
  checked by hand; they are far too small for real play.
- The random.org backend is always driven through a fake session; no test
  touches the network.
"""

from __future__ import annotations

__all__: tuple[str, ...] = ()
