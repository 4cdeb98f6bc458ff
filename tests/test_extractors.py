"""Tests for field extraction cascades."""

import pytest

from product_scraper.ingest.base import PriceMatch
from product_scraper.ingest.document import ProductDocument
from product_scraper.ingest.extractors import (
    NAME_RULES,
    AttributeRule,
    CascadeRule,
    ProductExtractor,
    TextRule,
    extract_description,
    extract_image_url,
    extract_name,
    extract_price,
    extract_product,
    parse_price,
    run_cascade,
)


def _doc(body: str) -> ProductDocument:
    return ProductDocument(f"<html><head><title>Shop</title></head><body>{body}</body></html>")


# ---------------------------------------------------------------------------
# Price parsing
# ---------------------------------------------------------------------------

def test_parse_price_strips_thousands_separators():
    """Test that thousands separators are stripped from the amount."""
    assert parse_price("$1,234.56") == PriceMatch(price=1234.56, currency="$")


def test_parse_price_rupee_integer():
    """Test parsing a whole-rupee price."""
    match = parse_price("₹99")

    assert match.price == 99
    assert match.currency == "₹"


def test_parse_price_allows_space_after_symbol():
    """Test a single space between symbol and amount."""
    assert parse_price("Price: € 45.00 incl. VAT") == PriceMatch(price=45.0, currency="€")


def test_parse_price_indian_grouping():
    """Test lakh-style digit grouping."""
    assert parse_price("₹1,23,456") == PriceMatch(price=123456.0, currency="₹")


def test_parse_price_without_symbol_is_none():
    """Test that text without a currency symbol yields no price."""
    assert parse_price("1234.56") is None
    assert parse_price("Currently unavailable") is None


# ---------------------------------------------------------------------------
# Price cascade
# ---------------------------------------------------------------------------

def test_primary_price_selector_wins():
    """Test that the first price selector takes precedence over later ones."""
    doc = _doc(
        '<span class="price">$20.00</span>'
        '<span id="priceblock_ourprice">$10.00</span>'
    )

    assert extract_price(doc) == PriceMatch(price=10.0, currency="$")


def test_selector_without_symbol_continues_cascade():
    """Test that a price element without a symbol passes to the next rule."""
    doc = _doc(
        '<span id="priceblock_ourprice">Currently unavailable</span>'
        '<div class="price">£15.50</div>'
    )

    assert extract_price(doc) == PriceMatch(price=15.5, currency="£")


def test_item_price_markup():
    """Test the data-hook product price markup."""
    doc = _doc('<span class="item_price" data-hook="product_price">$7.25</span>')

    assert extract_price(doc) == PriceMatch(price=7.25, currency="$")


def test_selector_beats_page_text_fallback():
    """A selector match wins over an earlier amount elsewhere on the page."""
    doc = _doc(
        "<p>Free shipping over $4.99</p>"
        '<span class="a-offscreen">$19.99</span>'
    )

    assert extract_price(doc) == PriceMatch(price=19.99, currency="$")


def test_page_text_fallback():
    """Test the page text scan when no price selector matches."""
    doc = _doc("<div><p>Only ¥3,000 today</p></div>")

    assert extract_price(doc) == PriceMatch(price=3000.0, currency="¥")


def test_page_text_fallback_ignores_scripts():
    """Test that amounts inside scripts are not picked up."""
    doc = _doc("<script>window.cfg = {min: '$5'};</script><p>Now €7</p>")

    assert extract_price(doc) == PriceMatch(price=7.0, currency="€")


def test_meta_price_without_text_is_skipped():
    """Test that a text-less price meta tag is skipped."""
    doc = _doc('<meta itemprop="price" content="12.00"><p>Sale: $9.00</p>')

    assert extract_price(doc) == PriceMatch(price=9.0, currency="$")


def test_no_price_anywhere():
    """Test a page with no price at all."""
    doc = _doc("<h1>Widget</h1><p>Contact us for pricing</p>")

    assert extract_price(doc) is None


# ---------------------------------------------------------------------------
# Name, description, image
# ---------------------------------------------------------------------------

def test_extract_name_trims_text():
    """Test that the product name is trimmed."""
    doc = _doc("<h1>\n  Acme Anvil  </h1>")

    assert extract_name(doc) == "Acme Anvil"


def test_extract_name_absent_or_empty():
    """Test that a missing or blank heading yields no name."""
    assert extract_name(_doc("<h2>Not a title</h2>")) is None
    assert extract_name(_doc("<h1>   </h1>")) is None


def test_extract_description():
    """Test description extraction."""
    doc = _doc('<div class="product-description">  Forged steel.  </div>')

    assert extract_description(doc) == "Forged steel."
    assert extract_description(_doc("<p>none</p>")) is None


def test_image_selector_order_beats_document_order():
    """Test that image selector order decides, not document order."""
    doc = _doc(
        '<img class="product-image" src="https://cdn.example.com/second.jpg">'
        '<img id="landingImage" src="https://cdn.example.com/first.jpg">'
    )

    assert extract_image_url(doc) == "https://cdn.example.com/first.jpg"


def test_image_absent_when_no_selector_matches():
    """Test a page without a product image."""
    doc = _doc('<img class="logo" src="/logo.png">')

    assert extract_image_url(doc) is None


def test_first_matched_image_without_src_ends_cascade():
    """Test that the first matched image ends the cascade even without src."""
    doc = _doc(
        '<img id="landingImage" data-src="/lazy.jpg">'
        '<img class="primary-image" src="/primary.jpg">'
    )

    assert extract_image_url(doc) is None


# ---------------------------------------------------------------------------
# Cascades and records
# ---------------------------------------------------------------------------

def test_run_cascade_skips_broken_selector():
    """Test that an unusable selector is treated as no match."""
    doc = _doc("<h1>Widget</h1>")

    match = run_cascade((TextRule("h1[[["), TextRule("h1")), doc)

    assert match.value == "Widget"


def test_appended_rules_extend_cascade():
    """Test adding a site rule after the built-in ones."""
    extractor = ProductExtractor(
        name_rules=NAME_RULES + (AttributeRule('meta[property="og:title"]', "content"),)
    )
    doc = ProductDocument(
        '<html><head><meta property="og:title" content="Acme Anvil"></head>'
        "<body></body></html>"
    )

    assert extractor.extract_name(doc) == "Acme Anvil"


def test_extract_product_full_record():
    """Test extracting every field from one page."""
    html = """
    <html><body>
      <h1>Acme Anvil</h1>
      <span id="priceblock_ourprice">$1,234.56</span>
      <div class="product-description">Forged steel anvil.</div>
      <img id="landingImage" src="https://cdn.example.com/anvil.jpg">
    </body></html>
    """

    record = extract_product(html)

    assert record.to_dict() == {
        "name": "Acme Anvil",
        "price": 1234.56,
        "currency": "$",
        "description": "Forged steel anvil.",
        "image_url": "https://cdn.example.com/anvil.jpg",
    }
    assert record.is_complete


def test_extract_product_nothing_found():
    """Test that an unrelated page produces an empty record."""
    record = extract_product("<html><body><p>Hello</p></body></html>")

    assert record.to_dict() == {}
    assert not record.is_complete
    assert record.price is None and record.currency is None


def test_cascade_rule_requires_apply():
    """Test that a rule without apply cannot be instantiated."""
    class IncompleteRule(CascadeRule):
        pass

    with pytest.raises(TypeError):
        IncompleteRule()
