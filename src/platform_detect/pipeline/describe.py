from typing import List, Optional

from platform_detect.pipeline.snapshot import Snapshot


def context_segments(s: Snapshot) -> List[str]:
    """Notes, bitness and device segments, before the name and version are prepended."""
    segments: List[str] = []
    if s.notes:
        segments.append('(' + '; '.join(s.notes) + ')')
    if s.manufacturer and s.product and s.manufacturer not in s.product:
        segments.append('on ' + s.manufacturer)
    if s.product:
        last = segments[-1] if segments else ''
        segments.append(('' if last.startswith('on ') else 'on ') + s.product)
    if s.bitness_note:
        segments.insert(0, s.bitness_note)
    return segments


def compose_description(s: Snapshot, version: Optional[str]) -> str:
    """Join name, version, notes, device and OS into one readable line.

    The OS is left out when it is a single word matching the browser's first
    word (``Chrome OS`` style duplicates) or when a product already places
    the browser. Falls back to the raw subject (empty for an empty subject)
    when nothing was detected.
    """
    segments = context_segments(s)
    if version:
        segments.insert(0, version)
    if s.name:
        segments.insert(0, s.name)

    info = s.os_info
    if info is not None and s.name:
        os_text = info.render()
        single_word = os_text == os_text.split(' ')[0]
        if not (single_word and (os_text == s.name.split(' ')[0] or s.product)):
            segments.append('(' + os_text + ')' if s.product else 'on ' + os_text)

    if segments:
        return ' '.join(segments)
    return s.ua or ''
