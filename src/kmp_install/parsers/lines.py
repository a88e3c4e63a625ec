"""Buffered line reassembly for chunked subprocess output."""


class LineBuffer:
    """
    Splits a stream of byte chunks into whole text lines.

    The last, possibly incomplete line of each chunk is kept back and
    prepended to the next chunk, so a line split across two reads is
    returned once, intact.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._pending = b""

    def feed(self, chunk: bytes) -> list[str]:
        """Add a chunk and return the lines it completed."""
        data = self._pending + chunk
        *complete, self._pending = data.split(b"\n")
        return [self._decode(raw) for raw in complete]

    def flush(self) -> list[str]:
        """Return the final unterminated line, if there is one."""
        if not self._pending:
            return []
        last, self._pending = self._pending, b""
        return [self._decode(last)]

    def _decode(self, raw: bytes) -> str:
        return raw.decode(self.encoding, errors="replace").rstrip("\r")
