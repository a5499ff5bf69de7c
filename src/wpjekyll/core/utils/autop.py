"""WordPress-style auto-paragraph: wrap bare text blocks of post HTML in <p> tags"""

import re


_ALLBLOCKS = (
    r'(?:table|thead|tfoot|caption|col|colgroup|tbody|tr|td|th|div|dl|dd|dt|ul|ol|li|pre'
    r'|form|map|area|blockquote|address|math|style|p|h[1-6]|hr|fieldset|legend|section'
    r'|article|aside|hgroup|header|footer|nav|figure|figcaption|details|menu|summary)'
)

_BLOCK_OPEN_RE = re.compile(rf'(<{_ALLBLOCKS}[\s/>])')
_BLOCK_CLOSE_RE = re.compile(rf'(</{_ALLBLOCKS}>)')
_BLOCK_TAG = rf'</?{_ALLBLOCKS}[^>]*>'
_SCRIPT_STYLE_RE = re.compile(r'<(script|style).*?</\1>', re.DOTALL)


def _protect_pre(text: str) -> tuple[str, dict[str, str]]:
    """Swap each <pre>...</pre> for a placeholder so its whitespace is left alone."""
    if '<pre' not in text:
        return text, {}
    pre_tags = {}
    parts = text.split('</pre>')
    last = parts.pop()
    out = []
    for i, part in enumerate(parts):
        start = part.find('<pre')
        if start == -1:
            out.append(part + '</pre>')
            continue
        name = f'<pre wp-pre-tag-{i}></pre>'
        pre_tags[name] = part[start:] + '</pre>'
        out.append(part[:start] + name)
    out.append(last)
    return ''.join(out), pre_tags


def wpautop(text: str, br: bool = True) -> str:
    """Port of WordPress wpautop(). Double newlines become paragraphs, single ones <br />."""
    if not text.strip():
        return ''

    text, pre_tags = _protect_pre(text + '\n')

    text = re.sub(r'<br\s*/?>\s*<br\s*/?>', '\n\n', text)
    text = _BLOCK_OPEN_RE.sub(r'\n\n\1', text)
    text = _BLOCK_CLOSE_RE.sub(r'\1\n\n', text)
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = re.sub(r'\n\n+', '\n\n', text)

    chunks = re.split(r'\n\s*\n', text)
    # WordPress trims newlines only; leading tabs and spaces are kept.
    text = ''.join('<p>' + chunk.strip('\n') + '</p>\n' for chunk in chunks if chunk.strip())

    text = re.sub(r'<p>\s*</p>', '', text)
    text = re.sub(r'<p>([^<]+)</(div|address|form)>', r'<p>\1</p></\2>', text)
    text = re.sub(rf'<p>\s*({_BLOCK_TAG})\s*</p>', r'\1', text)
    text = re.sub(r'<p>(<li.+?)</p>', r'\1', text)
    text = re.sub(r'<p><blockquote([^>]*)>', r'<blockquote\1><p>', text, flags=re.IGNORECASE)
    text = text.replace('</blockquote></p>', '</p></blockquote>')
    text = re.sub(rf'<p>\s*({_BLOCK_TAG})', r'\1', text)
    text = re.sub(rf'({_BLOCK_TAG})\s*</p>', r'\1', text)

    if br:
        # Newlines inside <script>/<style> must survive the <br /> pass.
        text = _SCRIPT_STYLE_RE.sub(lambda m: m.group(0).replace('\n', '<WPPreserveNewline />'), text)
        text = re.sub(r'(?<!<br />)\s*\n', '<br />\n', text)
        text = text.replace('<WPPreserveNewline />', '\n')

    text = re.sub(rf'({_BLOCK_TAG})\s*<br />', r'\1', text)
    text = re.sub(r'<br />(\s*</?(?:p|li|div|dl|dd|dt|th|pre|td|ul|ol)[^>]*>)', r'\1', text)
    text = re.sub(r'\n</p>$', '</p>', text)

    for name, original in pre_tags.items():
        text = text.replace(name, original)
    return text
