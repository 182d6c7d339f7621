"""Shrink job page HTML to the part worth sending to the model.

Pipeline:
1. Drop non-content tags, comments, page chrome, ads and share widgets
2. Drop forms that are not about applying for the job
3. Keep the first main-content container with enough text, else the body
4. If still too long, drop short keyword-free elements from the end
5. Hard cut at a tag boundary as the last resort

Never raises: any internal failure degrades to plain truncation.
"""

import logging
import re

from bs4 import BeautifulSoup, Comment

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 100_000

NON_CONTENT_TAGS = ["script", "style", "noscript", "iframe", "embed", "object", "svg", "canvas"]

NOISE_SELECTORS = [
    # navigation and page chrome
    "nav, header, footer, aside, .nav, .navigation, .navbar, .header, .footer, .sidebar, .side-bar",
    # ads and tracking
    '.ad, .ads, .advertisement, .advert, [class*="ad-"], [id*="ad-"], '
    ".tracking, .analytics, .cookie-banner, .cookie-consent",
    # social widgets and share buttons
    '.social, .social-media, .share, .share-buttons, [class*="social"], [class*="share"]',
]

FORM_KEEP_WORDS = ("apply", "application", "job", "position")

# Order matters: the first selector with enough text wins
MAIN_CONTENT_SELECTORS = [
    "main",
    "article",
    '[role="main"]',
    ".main-content",
    ".content",
    ".job-description",
    ".job-details",
    ".job-posting",
    '[class*="job"]',
    '[id*="job"]',
    ".description",
    ".post-content",
    ".entry-content",
]
MAIN_CONTENT_MIN_TEXT = 200

_JOB_KEYWORDS_RE = re.compile(
    r"job|position|role|responsibilit|qualification|requirement|skill|experience|education",
    re.IGNORECASE,
)
SHORT_ELEMENT_TEXT = 100
MIN_KEEP_RATIO = 0.8
TAG_ALIGN_RATIO = 0.95


def truncate_text(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Naive cut used for pasted text and as the reducer's fallback."""
    if max_length <= 0:
        return ""
    return text[:max_length]


def _remove(elements) -> None:
    for el in elements:
        # Already gone with a removed ancestor
        if el.decomposed:
            continue
        el.decompose()


def _strip_noise(soup: BeautifulSoup) -> None:
    _remove(soup.find_all(NON_CONTENT_TAGS))
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for selector in NOISE_SELECTORS:
        # Page-level classes like <body class="share-enabled"> must not take the page with them
        _remove(el for el in soup.select(selector) if el.name not in ("html", "body"))

    unrelated_forms = [
        form for form in soup.find_all("form")
        if not any(word in form.get_text().lower() for word in FORM_KEEP_WORDS)
    ]
    _remove(unrelated_forms)


def _main_content_html(soup: BeautifulSoup) -> str:
    for selector in MAIN_CONTENT_SELECTORS:
        candidate = soup.select_one(selector)
        if candidate is not None and len(candidate.get_text().strip()) > MAIN_CONTENT_MIN_TEXT:
            logger.debug("Found main content using selector: %s", selector)
            return candidate.decode_contents()

    body = soup.body
    if body is not None:
        return body.decode_contents()
    return soup.decode()


def _is_low_value(el) -> bool:
    text = el.get_text()
    return len(text.strip()) < SHORT_ELEMENT_TEXT and not _JOB_KEYWORDS_RE.search(text)


def _truncate_html(html: str, max_length: int) -> str:
    min_keep = int(max_length * MIN_KEEP_RATIO)
    soup = BeautifulSoup(html, "html.parser")
    length = len(soup.decode())
    removed = 0

    for el in reversed(soup.find_all(True)):
        if length <= max_length or length <= min_keep:
            break
        if el.decomposed or not _is_low_value(el):
            continue
        length -= len(el.decode())
        el.decompose()
        removed += 1

    current = soup.decode()
    if len(current) > max_length:
        logger.warning(
            "Still %d chars after removing %d elements, cutting to %d", len(current), removed, max_length
        )
        current = current[:max_length]
        last_tag_end = current.rfind(">")
        if last_tag_end > max_length * TAG_ALIGN_RATIO:
            current = current[: last_tag_end + 1]

    logger.debug("Removed %d low-value elements during truncation", removed)
    return current


def reduce_html(html: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Clean ``html`` for the model and bound it to ``max_length`` characters.

    Deterministic for a given input and ``max_length``.
    """
    if max_length <= 0:
        return ""
    try:
        soup = BeautifulSoup(html, "html.parser")
        _strip_noise(soup)
        cleaned = _main_content_html(soup)

        if len(cleaned) > max_length:
            logger.warning(
                "HTML still %d chars after cleaning, truncating to %d", len(cleaned), max_length
            )
            cleaned = _truncate_html(cleaned, max_length)

        if html:
            reduction = (len(html) - len(cleaned)) / len(html) * 100
            logger.info("HTML cleaned: %d -> %d chars (%.1f%% reduction)", len(html), len(cleaned), reduction)
        return cleaned
    except Exception as e:
        logger.warning("Error cleaning HTML, falling back to simple truncation: %s", e)
        return truncate_text(html, max_length)
