"""Tests for job page HTML reduction."""

import pytest

from services import html_reducer
from services.html_reducer import reduce_html, truncate_text

JOB_TEXT = (
    "Senior Backend Engineer at Acme Corp. Responsibilities: design and operate "
    "Python services, own the data pipeline, mentor engineers. Requirements: 5+ years "
    "of experience with Python and PostgreSQL, strong communication skills, a degree "
    "in Computer Science or equivalent experience."
)


def _page(body: str) -> str:
    return f"<html><head><title>Jobs</title><style>p {{ color: red; }}</style></head><body>{body}</body></html>"


class TestNoiseRemoval:
    def test_strips_scripts_styles_and_chrome(self):
        html = _page(
            "<nav>Home | Careers | About</nav>"
            "<header>Site header</header>"
            "<script>var tracking = 1;</script>"
            "<noscript>Enable JS</noscript>"
            "<!-- internal comment -->"
            f"<main><h1>Senior Backend Engineer</h1><p>{JOB_TEXT}</p></main>"
            "<footer>Copyright</footer>"
        )
        result = reduce_html(html)

        assert "Senior Backend Engineer" in result
        assert "var tracking" not in result
        assert "Home | Careers" not in result
        assert "Site header" not in result
        assert "internal comment" not in result
        assert "Copyright" not in result
        assert "color: red" not in result

    def test_strips_ads_and_social_widgets(self):
        html = _page(
            f"<div><p>{JOB_TEXT}</p></div>"
            '<div class="ad-banner">Buy now</div>'
            '<div class="cookie-banner">We use cookies</div>'
            '<div class="share-buttons">Share on X</div>'
            '<ul class="social-links"><li>LinkedIn</li></ul>'
            '<aside class="sidebar">Other jobs</aside>'
        )
        result = reduce_html(html)

        assert "Responsibilities" in result
        for noise in ("Buy now", "We use cookies", "Share on X", "LinkedIn", "Other jobs"):
            assert noise not in result

    def test_page_level_classes_keep_the_body(self):
        html = f'<html class="ad-free"><body class="share-enabled"><div><p>{JOB_TEXT}</p></div></body></html>'
        assert "Responsibilities" in reduce_html(html)

    def test_keeps_application_forms_only(self):
        html = _page(
            f"<section><p>{JOB_TEXT}</p></section>"
            "<form><label>Subscribe to our newsletter</label><input name='email'></form>"
            "<form><button>Apply for this position</button></form>"
        )
        result = reduce_html(html)

        assert "newsletter" not in result
        assert "Apply for this position" in result


class TestMainContent:
    def test_first_matching_selector_wins(self):
        html = _page(
            f"<article><p>ARTICLE {JOB_TEXT}</p></article>"
            f"<main><p>MAIN {JOB_TEXT}</p></main>"
        )
        result = reduce_html(html)

        # "main" is tried before "article"
        assert "MAIN" in result
        assert "ARTICLE" not in result

    def test_short_candidate_is_skipped(self):
        html = _page(
            "<main><p>Too short</p></main>"
            f"<article><p>ARTICLE {JOB_TEXT}</p></article>"
        )
        result = reduce_html(html)

        assert "ARTICLE" in result
        assert "Too short" not in result

    def test_job_class_candidate(self):
        html = _page(
            "<div class='intro'>Welcome to our careers site</div>"
            f"<div class='job-description'><p>{JOB_TEXT}</p></div>"
        )
        result = reduce_html(html)

        assert "Welcome to our careers site" not in result
        assert "Responsibilities" in result

    def test_falls_back_to_body(self):
        html = _page("<div><p>Short posting</p></div><p>Apply by email</p>")
        result = reduce_html(html)

        assert "Short posting" in result
        assert "Apply by email" in result
        assert "<body>" not in result

    def test_fragment_without_body(self):
        result = reduce_html("<p>Just a fragment</p><script>x()</script>")
        assert result == "<p>Just a fragment</p>"


class TestBoundedOutput:
    def test_short_elements_dropped_from_the_end_first(self):
        keyword_block = "".join(f"<p>Requirement {i}: {JOB_TEXT}</p>" for i in range(3))
        filler = "".join(f"<span>filler {i}</span>" for i in range(400))
        html = _page(f"<div>{keyword_block}{filler}</div>")
        max_length = len(keyword_block) + 2000

        result = reduce_html(html, max_length)

        assert len(result) <= max_length
        assert "Requirement 0" in result
        assert "Requirement 2" in result
        assert "filler 399" not in result
        assert "filler 0" in result

    def test_removal_keeps_most_of_the_budget(self):
        filler = "".join(f"<span>x{i:04d}</span>" for i in range(2000))
        html = _page(f"<div>{filler}</div>")

        result = reduce_html(html, 10_000)

        assert len(result) <= 10_000
        assert len(result) >= 8_000

    def test_hard_cut_when_content_is_all_important(self):
        html = _page("<p>" + "experience " * 5000 + "</p>")

        result = reduce_html(html, 1000)

        assert len(result) == 1000
        assert result.startswith("<p>experience")

    def test_hard_cut_aligns_to_tag_boundary(self):
        paragraphs = "".join(f"<p>Skill {i:03d} requirement</p>" for i in range(200))
        html = _page(paragraphs)

        result = reduce_html(html, 1000)

        assert len(result) <= 1000
        assert result.endswith(">")

    @pytest.mark.parametrize("max_length", [0, 1, 50, 500, 5000])
    def test_length_never_exceeds_limit(self, max_length):
        html = _page(
            "<nav>menu</nav>"
            + "".join(f"<div class='job-item'><p>{JOB_TEXT}</p><span>tag {i}</span></div>" for i in range(30))
        )
        assert len(reduce_html(html, max_length)) <= max_length

    @pytest.mark.parametrize("max_length", [0, -1, -500])
    def test_non_positive_limit_gives_empty_string(self, max_length):
        html = _page("".join(f"<p>Requirement {i}: {JOB_TEXT}</p>" for i in range(20)))
        assert reduce_html(html, max_length) == ""

    def test_deterministic(self):
        html = _page(
            "".join(
                f"<section><h2>Team {i}</h2><p>{JOB_TEXT}</p><span>{i}</span></section>"
                for i in range(50)
            )
        )
        first = reduce_html(html, 4000)
        second = reduce_html(html, 4000)
        assert first == second


class TestDegradation:
    def test_parser_failure_falls_back_to_truncation(self, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("parser crashed")

        monkeypatch.setattr(html_reducer, "BeautifulSoup", explode)
        html = "<html><body>" + "a" * 500 + "</body></html>"

        assert reduce_html(html, 100) == html[:100]

    def test_empty_input(self):
        assert reduce_html("", 100) == ""

    def test_plain_text_input(self):
        assert reduce_html("no markup here", 100) == "no markup here"


class TestTruncateText:
    def test_cuts_long_text(self):
        assert truncate_text("abcdef", 3) == "abc"

    def test_keeps_short_text(self):
        assert truncate_text("abc", 10) == "abc"

    def test_non_positive_limit(self):
        assert truncate_text("abc", 0) == ""
        assert truncate_text("abc", -5) == ""
