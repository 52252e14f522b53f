"""
Server-sent event parsing for vendor streaming APIs.
"""

from typing import AsyncIterator, List

DONE_SENTINEL = "[DONE]"


async def iter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """
    Yield the ``data`` payload of each server-sent event.

    Multi-line data fields are joined with newlines. Iteration stops at the
    ``[DONE]`` sentinel or when the line source is exhausted.

    Args:
        lines: Decoded lines without trailing newlines, e.g.
            ``httpx.Response.aiter_lines()``
    """
    data_lines: List[str] = []

    async for line in lines:
        line = line.rstrip("\r")

        if not line:
            # Blank line dispatches the pending event
            if data_lines:
                data = "\n".join(data_lines)
                data_lines = []
                if data == DONE_SENTINEL:
                    return
                yield data
            continue

        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if field != "data":
            continue
        if value.startswith(" "):
            value = value[1:]
        data_lines.append(value)

    if data_lines:
        data = "\n".join(data_lines)
        if data != DONE_SENTINEL:
            yield data
