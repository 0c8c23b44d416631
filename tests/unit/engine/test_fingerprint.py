"""
Tests for element fingerprints and similarity rules.
"""

import pytest

from healing_locator.engine.fingerprint import (
    ElementFingerprint,
    attribute_variations,
    capture_fingerprint,
    is_similar,
    learned_selector,
    within_tolerance,
)


def make_fingerprint(**overrides):
    values = {
        "tag": "input",
        "attributes": {"class": "form-control", "name": "saudiId", "type": "text"},
        "text": None,
        "position": (100.0, 200.0),
        "dimensions": (300.0, 40.0),
    }
    values.update(overrides)
    return ElementFingerprint(**values)


class TestCapture:
    """Test reading a fingerprint through the page boundary."""

    @pytest.mark.asyncio
    async def test_capture(self, page, make_element):
        element = make_element(
            "input",
            {"placeholder": "Saudi ID", "type": "text"},
            text="  ",
            box=(10, 20, 300, 40),
        )

        fp = await capture_fingerprint(page, element)

        assert fp.tag == "input"
        assert fp.attributes == {"placeholder": "Saudi ID", "type": "text"}
        assert fp.text is None
        assert fp.position == (10, 20)
        assert fp.dimensions == (300, 40)

    @pytest.mark.asyncio
    async def test_capture_without_box(self, page, make_element):
        fp = await capture_fingerprint(page, make_element("h3", text="Welcome Dummy"))

        assert fp.text == "Welcome Dummy"
        assert fp.position is None
        assert fp.dimensions is None


class TestSerialization:
    """Test dict conversion."""

    def test_round_trip(self):
        fp = make_fingerprint(text="Saudi ID")
        assert ElementFingerprint.from_dict(fp.to_dict()) == fp

    def test_missing_geometry(self):
        fp = ElementFingerprint.from_dict({"tag": "h3"})
        assert fp == ElementFingerprint(tag="h3")

    def test_missing_tag_rejected(self):
        with pytest.raises(KeyError):
            ElementFingerprint.from_dict({"attributes": {}})


class TestSimilarity:
    """Test the general similarity rule."""

    def test_tag_must_match(self):
        assert not is_similar(make_fingerprint(), make_fingerprint(tag="textarea"))

    def test_two_key_attributes(self):
        candidate = make_fingerprint(
            attributes={"class": "form-control", "name": "saudiId"},
            position=None,
        )
        assert is_similar(make_fingerprint(position=None), candidate)

    def test_one_key_attribute_not_enough(self):
        candidate = make_fingerprint(attributes={"class": "form-control"}, position=(900.0, 900.0))
        assert not is_similar(make_fingerprint(), candidate)

    def test_equal_text(self):
        reference = make_fingerprint(attributes={}, text="Login", position=None)
        candidate = make_fingerprint(attributes={}, text="Login", position=None)
        assert is_similar(reference, candidate)

    def test_missing_text_does_not_match(self):
        reference = make_fingerprint(attributes={}, position=None)
        candidate = make_fingerprint(attributes={}, position=None)
        assert not is_similar(reference, candidate)

    def test_close_position(self):
        candidate = make_fingerprint(attributes={}, position=(140.0, 160.0))
        assert is_similar(make_fingerprint(attributes={}), candidate)

    def test_position_tolerance_is_strict(self):
        candidate = make_fingerprint(attributes={}, position=(150.0, 200.0))
        assert not is_similar(make_fingerprint(attributes={}), candidate, tolerance_px=50)

    def test_within_tolerance_requires_both(self):
        assert not within_tolerance(None, (0, 0), 50)
        assert within_tolerance((0, 0), (99, -99), 100)


class TestSelectors:
    """Test selectors derived from a fingerprint."""

    def test_attribute_variations_order(self):
        assert attribute_variations(make_fingerprint()) == [
            'input[class*="form-control"]',
            'input[type="text"]',
            'input[name*="saudiId"]',
        ]

    def test_attribute_variations_skip_missing(self):
        assert attribute_variations(make_fingerprint(attributes={"type": "text"})) == ['input[type="text"]']

    def test_attribute_variations_quote(self):
        fp = make_fingerprint(attributes={"name": 'a"b'})
        assert attribute_variations(fp) == ['input[name*="a\\"b"]']

    def test_learned_selector_prefers_id(self):
        fp = make_fingerprint(attributes={"id": "saudi-id", "class": "form-control"})
        assert learned_selector(fp) == "input#saudi-id"

    def test_learned_selector_skips_dynamic_classes(self):
        fp = make_fingerprint(attributes={"class": "css-1abc23 form-control"})
        assert learned_selector(fp) == "input.form-control"

    def test_learned_selector_escapes_id(self):
        fp = make_fingerprint(attributes={"id": "user:id"})
        assert learned_selector(fp) == "input#user\\:id"

    def test_learned_selector_none(self):
        assert learned_selector(make_fingerprint(attributes={"class": "sc-abc"})) is None
