"""Minimal markdown to HTML conversion for tutor answers."""

import html
import re

_CODE_BLOCK = re.compile(r"```(\w*)\n?([\s\S]*?)```")
_HEADING = re.compile(r"^(#{1,3})\s+(.+)$")
_BULLET = re.compile(r"^[-*]\s+")
_NUMBERED = re.compile(r"^\d+\.\s+")

_HEADING_CLASSES = {
    1: "text-lg font-semibold mt-3 mb-1",
    2: "text-base font-semibold mt-3 mb-1",
    3: "text-sm font-semibold mt-2 mb-1",
}


def _wrap_lists(lines: list[str], pattern: re.Pattern[str], tag: str, classes: str) -> list[str]:
    result: list[str] = []
    in_list = False
    for line in lines:
        stripped = line.strip()
        if pattern.match(stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            result.append(f"<li>{pattern.sub('', stripped)}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return result


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: headings, bold, italic, inline code, code blocks, links, lists.
    """
    text = html.escape(text, quote=True)

    text = _CODE_BLOCK.sub(
        r'<pre class="bg-slate-950 text-slate-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-slate-700 text-pink-300 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"__(.+?)__", r"<strong>\1</strong>", text)
    text = re.sub(r"(?<![\w*])\*([^*\n]+)\*(?!\*)", r"<em>\1</em>", text)
    text = re.sub(r"(?<!\w)_([^_\n]+)_(?!\w)", r"<em>\1</em>", text)

    # Only absolute http(s) links; anything else stays as plain text.
    text = re.sub(
        r"\[([^\]]+)\]\((https?://[^\s)]+)\)",
        r'<a href="\2" class="text-indigo-300 underline" target="_blank">\1</a>',
        text,
    )

    lines = []
    for line in text.split("\n"):
        match = _HEADING.match(line.strip())
        if match:
            level = len(match.group(1))
            lines.append(f'<div class="{_HEADING_CLASSES[level]}">{match.group(2)}</div>')
        else:
            lines.append(line)

    lines = _wrap_lists(lines, _BULLET, "ul", "list-disc list-inside my-2 space-y-1")
    lines = _wrap_lists(lines, _NUMBERED, "ol", "list-decimal list-inside my-2 space-y-1")

    rendered = "\n".join(lines)
    # Block elements already break lines; avoid doubling the spacing.
    rendered = re.sub(r"(</?(?:ul|ol|li|div)[^>]*>)\n", r"\1", rendered)
    return rendered.replace("\n", "<br>")
