from typing import Any, Iterable, List, Mapping, Optional, Union

ParagraphNodes = List[Mapping[str, Any]]
ChapterContent = Union[str, ParagraphNodes, None]


def slate_to_plain_text(nodes: Optional[Iterable[Mapping[str, Any]]]) -> str:
    """
    Flatten a rich-text paragraph node list into newline-joined plain text.

    Each ``paragraph`` node becomes one line made of its children's ``text``;
    any other node type contributes an empty line so line numbering stays
    aligned with the source document.
    """
    if not nodes:
        return ''

    lines = []
    for node in nodes:
        if node.get('type') == 'paragraph':
            lines.append(''.join(child.get('text') or '' for child in node.get('children') or []))
        else:
            lines.append('')
    return '\n'.join(lines)


def coerce_text(content: ChapterContent) -> str:
    """Accept plain text, a paragraph node list, or None."""
    if content is None:
        return ''
    if isinstance(content, str):
        return content
    return slate_to_plain_text(content)
