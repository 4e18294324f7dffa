"""
Shared test fixtures for the refchain test suite.
"""

import pytest
from host_fakes import (
    FORMATTERS,
    FakePresentationRegistry,
    FakeRecord,
    FakeRenderer,
    build_schema,
    reference,
)

from refchain.schema import PresentationCatalog


@pytest.fixture
def registry():
    return build_schema()


@pytest.fixture
def presentation_registry():
    return FakePresentationRegistry(FORMATTERS)


@pytest.fixture
def presentations(presentation_registry):
    return PresentationCatalog(presentation_registry)


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def root_field():
    """Reference field on the host record that owns the configuration."""
    return reference("field_ref", "node", ["article"], cardinality=-1)


@pytest.fixture
def content():
    """Root record with two sections, each holding media.

    root(node:article)
      field_sections: [text s1, gallery g1, text s2]
        s1.field_media: [m1, m2, m3]
        g1.field_media: [m4]
        s2.field_media: [m5, m6]
    """
    media = {
        n: FakeRecord(f"m{n}", "media", "image", {"field_image": f"img{n}.png"})
        for n in range(1, 7)
    }
    s1 = FakeRecord(
        "s1", "paragraph", "text",
        {"field_body": "One", "field_media": [media[1], media[2], media[3]]},
    )
    g1 = FakeRecord("g1", "paragraph", "gallery", {"field_media": [media[4]]})
    s2 = FakeRecord(
        "s2", "paragraph", "text",
        {"field_body": "Two", "field_media": [media[5], media[6]]},
    )
    article = FakeRecord("n1", "node", "article", {"field_sections": [s1, g1, s2]})
    host = FakeRecord("h1", "node", "page", {"field_ref": [article]}, langcode="de")
    return host
