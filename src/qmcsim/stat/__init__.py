"""Statistical collectors."""

from qmcsim.stat.tally import Tally

__all__ = ["Tally"]
