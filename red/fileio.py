"""Reading documents from disk and writing them back."""

import os


def read_rows(filename: str) -> list[bytes]:
    """Read a file as a list of lines without their line terminators.

    Trailing ``\\r`` and ``\\n`` bytes are stripped from every line, so CRLF
    files load the same as LF files.

    Raises:
        OSError: if the file cannot be opened or read.
    """
    with open(filename, 'rb') as f:
        return [line.rstrip(b"\r\n") for line in f]


def write_payload(filename: str, payload: bytes) -> int:
    """Write ``payload`` to ``filename`` in place.

    The file is created if needed (mode 0644), truncated to exactly the
    payload length and then written.

    Returns:
        Number of bytes written.

    Raises:
        OSError: on any failure; the caller reports it.
    """
    fd = os.open(filename, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(payload))
        view = memoryview(payload)
        written = 0
        while written < len(payload):
            written += os.write(fd, view[written:])
        return written
    finally:
        os.close(fd)
