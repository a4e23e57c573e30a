import logging
from collections import defaultdict

import httpx

logger = logging.getLogger("wordgrid")


def build_message(words: list[str], grid_size: int, words_per_group: int = 10) -> tuple[str, str]:
    """Title and body for a solve notification: a few words per length, then counts."""
    by_length: dict[int, list[str]] = defaultdict(list)
    for w in sorted(words):
        by_length[len(w)].append(w)

    title = f"Word grid {grid_size}x{grid_size} - {len(words)} words"

    selected = []
    for length in sorted(by_length.keys(), reverse=True):
        selected.extend(by_length[length][:words_per_group])

    counts = " | ".join(f"{l}L:{len(g)}" for l, g in sorted(by_length.items()))
    body = ",".join(selected) + "\n\n" + counts
    return title, body


async def send_notification(
    words: list[str],
    grid_size: int,
    topic: str,
    ntfy_url: str = "https://ntfy.sh",
    words_per_group: int = 10,
    transport: httpx.AsyncBaseTransport | None = None,
):
    """Send solve results to ntfy.sh. Best-effort: failures are logged, not raised."""
    try:
        title, body = build_message(words, grid_size, words_per_group)

        async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
            resp = await client.post(
                f"{ntfy_url}/{topic}",
                content=body.encode("utf-8"),
                headers={
                    "Title": title,
                    "Tags": "mag",
                },
            )
            resp.raise_for_status()
            logger.info("Notification sent to %s/%s (status %d)", ntfy_url, topic, resp.status_code)

    except Exception as e:
        logger.error("Failed to send notification: %s", e)
