import pytest

from analyzers.headers import SECURITY_HEADERS, SecurityHeadersAnalyzer, check_security_headers
from analyzers.seo import SeoAnalyzer, check_seo
from analyzers.technologies import TechnologyAnalyzer, detect_technologies
from core.context import ScanContext
from core.normalizer import normalize_url
from models.report import HttpProbeResult
from models.technology import EvidenceRule, Technology
from rules.rules_loader import get_rules


def make_context(headers=None, html="", robots=False, sitemap=False, failed=False):
    main = HttpProbeResult.failed(10000) if failed else HttpProbeResult(
        status_ok=True,
        headers=headers or {},
        body=html,
        response_time_ms=42,
        fetch_failed=False,
        status_code=200,
    )
    return ScanContext(
        target=normalize_url("https://example.com"),
        main=main,
        has_robots_txt=robots,
        has_sitemap=sitemap,
    )


# --- Security headers ---------------------------------------------------------

@pytest.mark.parametrize("present, expected_score", [
    (0, 0), (1, 17), (2, 33), (3, 50), (4, 67), (5, 83), (6, 100),
])
def test_security_header_score_table(present, expected_score):
    headers = {name: "x" for name, _ in SECURITY_HEADERS[:present]}
    findings = check_security_headers(headers)
    assert sum(findings.checks) == present
    assert findings.score == expected_score


def test_security_headers_presence_only():
    findings = check_security_headers({
        "strict-transport-security": "",
        "referrer-policy": "no-referrer",
        "content-type": "text/html",
    })
    assert findings.strict_transport_security is True
    assert findings.referrer_policy is True
    assert findings.x_frame_options is False
    assert findings.content_security_policy is False
    assert findings.score == 33


def test_security_headers_names_are_case_insensitive():
    findings = check_security_headers({"X-Frame-Options": "DENY", "Content-Security-Policy": "default-src 'self'"})
    assert findings.x_frame_options is True
    assert findings.content_security_policy is True


@pytest.mark.asyncio
async def test_security_headers_analyzer_failed_fetch_is_all_false():
    findings = await SecurityHeadersAnalyzer().analyze(make_context(failed=True))
    assert not any(findings.checks)
    assert findings.score == 0


@pytest.mark.asyncio
async def test_security_headers_analyzer_without_probe_result():
    context = ScanContext(target=normalize_url("example.com"), main=None)
    findings = await SecurityHeadersAnalyzer().analyze(context)
    assert findings.score == 0


# --- SEO ----------------------------------------------------------------------

FULL_HEAD = """
<html><head>
  <TITLE>Example Domain</TITLE>
  <meta content="An example" name='description'>
  <meta name=viewport content="width=device-width, initial-scale=1">
  <link href="https://example.com/" rel="canonical" />
</head><body></body></html>
"""


def test_seo_all_html_checks_any_order_and_quote_style():
    findings = check_seo(FULL_HEAD, has_robots_txt=True, has_sitemap=True)
    assert findings.has_title
    assert findings.has_description
    assert findings.has_viewport
    assert findings.has_canonical
    assert findings.score == 100


@pytest.mark.parametrize("passed, expected_score", [
    (0, 0), (1, 17), (2, 33), (3, 50), (4, 67), (5, 83), (6, 100),
])
def test_seo_score_table(passed, expected_score):
    snippets = [
        "<title>Hi</title>",
        '<meta name="description" content="d">',
        '<meta name="viewport" content="v">',
        '<link rel="canonical" href="/">',
    ]
    html = "".join(snippets[:min(passed, 4)])
    findings = check_seo(html, has_robots_txt=passed >= 5, has_sitemap=passed >= 6)
    assert findings.score == expected_score


@pytest.mark.parametrize("html", [
    "<title></title>",
    "<title>   \n </title>",
    "<h1>No title here</h1>",
])
def test_seo_title_must_be_non_empty(html):
    assert check_seo(html, False, False).has_title is False


def test_seo_title_spanning_lines():
    assert check_seo("<title>\n  Multi\n  line\n</title>", False, False).has_title


def test_seo_ignores_lookalike_attributes():
    html = '<meta data-name="description" content="x"><meta name="descriptions" content="y">'
    findings = check_seo(html, False, False)
    assert findings.has_description is False


@pytest.mark.asyncio
async def test_seo_analyzer_scores_once_with_reachability():
    context = make_context(html="<title>Example</title>", robots=True, sitemap=False)
    findings = await SeoAnalyzer().analyze(context)
    assert findings.has_title and findings.has_robots_txt
    assert not findings.has_sitemap
    assert findings.score == 33


# --- Technologies -------------------------------------------------------------

def test_signature_table_is_loaded_in_order():
    names = [tech.name for tech in get_rules()]
    assert names[:5] == ["Nginx", "Apache", "Cloudflare", "Vercel", "Netlify"]
    assert names[5:9] == ["PHP", "ASP.NET", "Express.js", "Next.js"]
    assert names[-4:] == ["Google Analytics", "Hotjar", "Segment", "Mixpanel"]
    assert len(names) == 26
    analytics = next(t for t in get_rules() if t.name == "Google Analytics")
    assert [r.pattern for r in analytics.evidence_rules] == ["google-analytics", "gtag"]


def test_detection_is_case_insensitive_and_deduplicated():
    html = "<script src='react.js'></script><div data-React-root>react</div>"
    assert detect_technologies({}, html, get_rules()) == ("React",)


def test_detection_from_headers():
    headers = {"server": "cloudflare", "x-powered-by": "PHP/8.2, Express"}
    assert detect_technologies(headers, "", get_rules()) == ("Cloudflare", "PHP", "Express.js")


def test_header_signatures_do_not_match_body():
    # "nginx" in the body is not a Server header
    assert detect_technologies({}, "powered by nginx", get_rules()) == ()


def test_google_analytics_either_pattern():
    assert detect_technologies({}, "gtag('config', 'G-1')", get_rules()) == ("Google Analytics",)
    assert detect_technologies({}, "//www.google-analytics.com/analytics.js", get_rules()) == ("Google Analytics",)


def test_detection_follows_table_order():
    html = "mixpanel jquery wordpress"
    assert detect_technologies({"server": "Apache/2.4"}, html, get_rules()) == (
        "Apache", "jQuery", "WordPress", "Mixpanel",
    )


@pytest.mark.asyncio
async def test_technology_analyzer_with_custom_rules():
    rules = [
        Technology(name="FooServer", evidence_rules=(EvidenceRule(source="server", pattern="foo"),)),
        Technology(name="FooServer", evidence_rules=(EvidenceRule(source="html", pattern="foo"),)),
    ]
    analyzer = TechnologyAnalyzer(rules)
    technologies = await analyzer.analyze(make_context(headers={"server": "FOO/1.0"}, html="foo"))
    assert technologies == ("FooServer",)


@pytest.mark.asyncio
async def test_technology_analyzer_failed_fetch_detects_nothing():
    assert await TechnologyAnalyzer().analyze(make_context(failed=True)) == ()
