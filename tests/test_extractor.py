"""Tests for tag extraction from raw HTML."""

from linkpreview.extractor import (
    HTMLTagExtractor,
    MetaCategory,
    classify_meta_tag,
    extract_title_element,
    parse_attributes,
)
from linkpreview.schemas import LinkMetadata

extractor = HTMLTagExtractor()


def _base() -> LinkMetadata:
    return LinkMetadata.for_response("https://example.com", "https://example.com/home")


def _extract(html: str) -> LinkMetadata:
    return extractor.extract(html, _base())


def test_parse_title_element():
    metadata = _extract("<html><head><title>Test Page Title</title></head></html>")
    assert metadata.title == "Test Page Title"


def test_title_element_is_trimmed():
    assert extract_title_element("<title>\n   Spaced Out  \n</title>") == "Spaced Out"


def test_empty_title_element_is_none():
    metadata = _extract("<html><head><title></title></head></html>")
    assert metadata.title is None


def test_whitespace_title_element_is_none():
    metadata = _extract("<title>   \n </title>")
    assert metadata.title is None


def test_open_graph_title_beats_title_element():
    html = """
    <title>Original Title</title>
    <meta property="og:title" content="Open Graph Title">
    """
    assert _extract(html).title == "Open Graph Title"


def test_twitter_title_beats_title_element():
    html = """
    <title>Original Title</title>
    <meta name="twitter:title" content="Twitter Title">
    """
    assert _extract(html).title == "Twitter Title"


def test_og_title_twitter_title_and_title_element_all_present():
    html = """
    <head>
        <meta property="og:title" content="OG Title">
        <meta name="twitter:title" content="Twitter Title">
        <title>HTML Title</title>
    </head>
    """
    assert _extract(html).title == "OG Title"


def test_meta_title_wins_even_after_title_element():
    html = '<title>First In Document</title><meta name="twitter:title" content="Card Title">'
    assert _extract(html).title == "Card Title"


def test_empty_meta_title_falls_back_to_title_element():
    html = '<meta property="og:title" content=""><title>Fallback</title>'
    assert _extract(html).title == "Fallback"


def test_first_og_image_wins():
    html = """
    <meta property="og:image" content="https://example.com/first.jpg">
    <meta property="og:image" content="https://example.com/second.jpg">
    """
    assert _extract(html).image_url == "https://example.com/first.jpg"


def test_later_twitter_image_does_not_override_og_image():
    html = """
    <meta property="og:image" content="https://example.com/og.jpg">
    <meta name="twitter:image" content="https://example.com/twitter.png">
    """
    assert _extract(html).image_url == "https://example.com/og.jpg"


def test_twitter_image_used_alone():
    html = '<meta name="twitter:image" content="https://example.com/twitter-image.png">'
    assert _extract(html).image_url == "https://example.com/twitter-image.png"


def test_unparsable_image_url_falls_through_to_next_candidate():
    html = """
    <meta property="og:image" content="not a url at all">
    <meta name="twitter:image" content="https://example.com/ok.png">
    """
    assert _extract(html).image_url == "https://example.com/ok.png"


def test_relative_image_url_is_kept_unresolved():
    html = '<meta property="og:image" content="/static/cover.png">'
    assert _extract(html).image_url == "/static/cover.png"


def test_attribute_order_does_not_matter():
    html = """
    <meta content="Reversed Title" property="og:title">
    <meta content='https://example.com/single.jpg' property='og:image' />
    """
    metadata = _extract(html)
    assert metadata.title == "Reversed Title"
    assert metadata.image_url == "https://example.com/single.jpg"


def test_uppercase_tags_and_attribute_values():
    html = '<META PROPERTY="OG:TITLE" CONTENT="Shouting">'
    assert _extract(html).title == "Shouting"


def test_malformed_meta_tags_are_skipped():
    html = '<meta property="og:title" content="Valid"><meta property="og:image" content=>'
    metadata = _extract(html)
    assert metadata.title == "Valid"
    assert metadata.image_url is None


def test_badly_broken_head_still_yields_clean_tags():
    html = """
    <html>
    <head>
        <meta property="og:title" content="Valid Title">
        <meta property="og:image" content=>
        <meta property= content="No property name">
        <meta property="og:broken" content="Missing closing tag
        <meta property="og:description" content="Valid Description">
    </head>
    </html>
    """
    metadata = _extract(html)
    assert metadata.title == "Valid Title"
    assert metadata.image_url is None


def test_unclosed_meta_tag_at_end_of_document():
    html = '<meta property="og:title" content="Kept"><meta property="og:image" content="https://x.test/a.png"'
    metadata = _extract(html)
    assert metadata.title == "Kept"
    assert metadata.image_url is None


def test_video_and_remote_video_url():
    html = """
    <meta property="og:video" content="https://example.com/player">
    <meta property="og:video:url" content="https://cdn.example.com/clip.mp4">
    <meta property="og:video:secure_url" content="https://cdn.example.com/secure.mp4">
    """
    metadata = _extract(html)
    assert metadata.video_url == "https://example.com/player"
    assert metadata.remote_video_url == "https://cdn.example.com/clip.mp4"


def test_twitter_player_tags():
    html = """
    <meta name="twitter:player" content="https://example.com/embed/1">
    <meta name="twitter:player:stream" content="https://example.com/stream/1.mp4">
    """
    metadata = _extract(html)
    assert metadata.video_url == "https://example.com/embed/1"
    assert metadata.remote_video_url == "https://example.com/stream/1.mp4"


def test_description_becomes_summary():
    html = """
    <meta name="description" content="Plain description">
    <meta property="og:description" content="OG description">
    """
    assert _extract(html).summary == "Plain description"


def test_icon_from_link_tag():
    html = '<link rel="apple-touch-icon" href="https://example.com/touch.png">'
    assert _extract(html).icon_url == "https://example.com/touch.png"


def test_first_qualifying_link_icon_wins():
    html = """
    <link rel="stylesheet" href="/style.css">
    <link rel="shortcut icon" href="/favicon.ico">
    <link rel="icon" type="image/png" href="/favicon-32.png">
    """
    assert _extract(html).icon_url == "/favicon.ico"


def test_meta_icon_beats_link_icon():
    html = """
    <link rel="icon" href="https://example.com/favicon.ico">
    <meta property="og:icon" content="https://example.com/og-icon.png">
    """
    assert _extract(html).icon_url == "https://example.com/og-icon.png"


def test_link_rel_tokens_are_matched_whole():
    html = '<link rel="iconography" href="/nope.png"><link rel="ICON" href="/yes.png">'
    assert _extract(html).icon_url == "/yes.png"


def test_later_video_tag_still_found_after_main_fields_are_filled():
    html = """
    <meta property="og:title" content="Title">
    <meta property="og:image" content="https://example.com/i.png">
    <meta property="og:video:url" content="https://example.com/v.mp4">
    <meta property="og:video" content="https://example.com/player">
    <meta property="og:icon" content="https://example.com/icon.png">
    <meta property="og:description" content="Late description">
    """
    metadata = _extract(html)
    assert metadata.video_url == "https://example.com/player"
    assert metadata.icon_url == "https://example.com/icon.png"
    assert metadata.summary == "Late description"


def test_html_entities_are_preserved():
    html = '<meta property="og:title" content="Unicode: 🌟 &quot;&amp;">'
    title = _extract(html).title
    assert "🌟" in title
    assert "&quot;" in title


def test_empty_html_yields_empty_metadata():
    metadata = _extract("")
    assert metadata.title is None
    assert metadata.image_url is None
    assert metadata.icon_url is None
    assert metadata.url == "https://example.com/home"
    assert metadata.original_url == "https://example.com"


def test_base_metadata_is_not_mutated():
    base = _base()
    extractor.extract('<meta property="og:title" content="New">', base)
    assert base.title is None


def test_extraction_is_deterministic():
    html = """
    <title>T</title>
    <meta property="og:image" content="https://example.com/a.png">
    <link rel="icon" href="/favicon.ico">
    """
    assert _extract(html) == _extract(html)


def test_parse_attributes_keeps_first_occurrence_and_ignores_unknown():
    attributes = parse_attributes(' property="og:title" data-x="1" property="og:image" content=Bare')
    assert attributes == {"property": "og:title", "content": "Bare"}


def test_classify_meta_tag_precedence_order():
    assert classify_meta_tag({"property": "og:title", "name": "twitter:image"}) is MetaCategory.TITLE
    assert classify_meta_tag({"name": "apple-touch-icon"}) is MetaCategory.ICON
    assert classify_meta_tag({"name": "viewport"}) is None
    assert classify_meta_tag({}) is None


def test_greater_than_inside_quoted_value_keeps_tag():
    html = '<title>Fallback</title><meta property="og:title" content="A > B">'
    assert _extract(html).title == "A > B"


def test_greater_than_inside_link_attribute():
    html = "<link title='a > b' rel='icon' href='/icon.png'>"
    assert _extract(html).icon_url == "/icon.png"
