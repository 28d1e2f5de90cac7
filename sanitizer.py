# sanitizer.py
import nh3

# Allowlist tag & atribut untuk konten HTML dari editor admin dan form publik.
# Tag di CONTENT_DROP_TAGS dibuang bersama isinya, tag lain yang tidak ada di
# ALLOWED_TAGS dibuang tapi teksnya tetap.
ALLOWED_TAGS = {
    "a", "abbr", "b", "blockquote", "br", "caption", "code", "col", "colgroup",
    "dd", "del", "div", "dl", "dt", "em", "figcaption", "figure",
    "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "li", "mark",
    "ol", "p", "pre", "q", "s", "small", "span", "strong", "sub", "sup",
    "table", "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
}

ALLOWED_ATTRIBUTES = {
    "*": {"class", "id", "title", "lang", "dir"},
    "a": {"href", "target", "rel"},
    "img": {"src", "alt", "width", "height"},
    "td": {"colspan", "rowspan", "align"},
    "th": {"colspan", "rowspan", "align", "scope"},
    "col": {"span"},
    "ol": {"start", "type"},
}

CONTENT_DROP_TAGS = {"script", "style", "iframe", "object", "embed", "noscript", "template"}

URL_SCHEMES = {"http", "https", "mailto", "tel"}


def sanitize_html(value):
    if value is None:
        return value
    cleaned = nh3.clean(
        value,
        tags=ALLOWED_TAGS,
        clean_content_tags=CONTENT_DROP_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=URL_SCHEMES,
        link_rel=None,
        strip_comments=True,
    )
    return cleaned.strip()
