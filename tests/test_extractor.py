import asyncio

from page_links.extractor import (
    ELEMENT_RULES,
    collect_candidates,
    extract_links_from_current_page,
    extract_visible_links,
    finalize_urls,
)

from fakes import BrokenDom, FakeDom, FakeElement


def extract(dom):
    return asyncio.run(extract_visible_links(dom))


def test_end_to_end_text_only():
    dom = FakeDom(text="Visit https://example.com/page?x=1 or www.test.org today")
    assert extract(dom) == ["https://example.com/page?x=1", "https://www.test.org"]


def test_visible_links_and_images_are_collected():
    dom = FakeDom(
        links=[FakeElement("https://example.com/a")],
        images=[FakeElement("https://img.example.com/logo.png")],
    )
    assert extract(dom) == ["https://example.com/a", "https://img.example.com/logo.png"]


def test_hidden_links_and_images_are_excluded():
    dom = FakeDom(
        links=[
            FakeElement("https://zero-width.example.com/", width=0),
            FakeElement("https://zero-height.example.com/", height=0),
            FakeElement("https://invisible.example.com/", visibility="hidden"),
            FakeElement("https://undisplayed.example.com/", display="none"),
            FakeElement("https://unrendered.example.com/", rendered=False),
        ],
        images=[FakeElement("https://img.example.com/hidden.png", display="none")],
    )
    assert extract(dom) == []


def test_media_is_collected_even_when_hidden():
    # link/image harvesting is gated on visibility, media sources are not
    video = FakeElement("https://example.com/v.mp4", display="none", rendered=False)
    link = FakeElement("https://example.com/hidden-link", display="none", rendered=False)
    dom = FakeDom(links=[link], media=[video])
    assert extract(dom) == ["https://example.com/v.mp4"]
    assert video.box_reads == 0


def test_non_fetchable_schemes_are_skipped():
    dom = FakeDom(
        links=[
            FakeElement("mailto:someone@example.com"),
            FakeElement("javascript:void(0)"),
            FakeElement(""),
            FakeElement("ftp://files.example.org/pub"),
        ],
        media=[FakeElement("blob:https://example.com/1234")],
    )
    assert extract(dom) == ["ftp://files.example.org/pub"]


def test_visibility_is_measured_on_every_call():
    link = FakeElement("https://example.com/toggle")
    dom = FakeDom(links=[link])

    assert extract(dom) == ["https://example.com/toggle"]
    link.visibility = "hidden"
    assert extract(dom) == []
    assert link.box_reads == 2


def test_duplicates_across_sources_collapse():
    dom = FakeDom(
        text="https://example.com/a and again https://example.com/a",
        links=[FakeElement("https://example.com/a"), FakeElement("https://example.com/a")],
        media=[FakeElement("https://example.com/a")],
    )
    assert extract(dom) == ["https://example.com/a"]


def test_invalid_candidates_are_dropped():
    dom = FakeDom(
        text="port overflow http://example.com:999999/x",
        links=[FakeElement("http://[broken")],
    )
    assert extract(dom) == []


def test_output_is_sorted_unique_valid_and_deterministic():
    dom = FakeDom(
        text="www.zeta.com http://alpha.example.com https://Beta.example.com www.zeta.com",
        links=[FakeElement("https://middle.example.com/")],
        images=[FakeElement("https://alpha.example.com/img.png")],
    )
    first = extract(dom)
    second = extract(dom)

    assert first == second
    assert first == sorted(first)
    assert len(first) == len(set(first))
    assert first == [
        "http://alpha.example.com",
        "https://Beta.example.com",
        "https://alpha.example.com/img.png",
        "https://middle.example.com/",
        "https://www.zeta.com",
    ]


def test_dom_failure_returns_empty_list():
    assert extract(BrokenDom(links=[FakeElement("https://example.com/")])) == []


def test_current_page_alias():
    dom = FakeDom(text="https://example.com")
    assert asyncio.run(extract_links_from_current_page(dom)) == ["https://example.com"]


def test_collect_candidates_keeps_invalid_entries_until_finalized():
    dom = FakeDom(text="http://example.com:999999/x www.example.com")
    candidates = asyncio.run(collect_candidates(dom))
    assert candidates == {"http://example.com:999999/x", "https://www.example.com"}
    assert finalize_urls(candidates) == ["https://www.example.com"]


def test_only_media_rule_skips_visibility():
    gated = {rule.name: rule.requires_visibility for rule in ELEMENT_RULES}
    assert gated == {"links": True, "images": True, "media": False}
