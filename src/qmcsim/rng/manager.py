"""Group resets over a set of random streams."""

from __future__ import annotations

from qmcsim.rng.base import RandomStream


class RandomStreamManager:
    """
    Holds a list of streams and forwards the reset operations to all of them.

    Useful to reset every stream of a model with one call, for example to
    move all streams to their next substream between replications.
    """

    def __init__(self) -> None:
        self._streams: list[RandomStream] = []

    def add(self, stream: RandomStream) -> RandomStream:
        """Register `stream` (once) and return it."""
        if stream is None:
            raise ValueError("stream must not be None")
        if not any(s is stream for s in self._streams):
            self._streams.append(stream)
        return stream

    def remove(self, stream: RandomStream) -> bool:
        """Unregister `stream`; return True if it was registered."""
        for k, s in enumerate(self._streams):
            if s is stream:
                del self._streams[k]
                return True
        return False

    def clear(self) -> None:
        self._streams.clear()

    @property
    def streams(self) -> tuple[RandomStream, ...]:
        return tuple(self._streams)

    def __len__(self) -> int:
        return len(self._streams)

    def reset_start_stream(self) -> None:
        for stream in self._streams:
            stream.reset_start_stream()

    def reset_start_substream(self) -> None:
        for stream in self._streams:
            stream.reset_start_substream()

    def reset_next_substream(self) -> None:
        for stream in self._streams:
            stream.reset_next_substream()

    def __str__(self) -> str:
        return f"{type(self).__name__}[number of stored streams: {len(self._streams)}]"
