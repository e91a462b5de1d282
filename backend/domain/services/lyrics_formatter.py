import re

# [mm:ss.xx] or [mm:ss.xxx]
LRC_TIME_TAG = re.compile(r"\[\d{2}:\d{2}\.\d{2,3}\]")

def format_lyrics_content(content: str) -> str:
    """
    Split LRC text whose time tags were crammed onto a single line into one
    line per tag.

    Text that already contains line breaks, or carries no time tags, is
    returned unchanged so stored lyrics read back byte for byte.
    """
    if not content or "\n" in content or "\r" in content:
        return content

    tags = list(LRC_TIME_TAG.finditer(content))
    if len(tags) < 2:
        return content

    lines = []
    cursor = 0
    for tag in tags[1:]:
        lines.append(content[cursor:tag.start()])
        cursor = tag.start()
    lines.append(content[cursor:])

    return "\n".join(lines) + "\n"
