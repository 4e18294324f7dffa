"""
Tests for schema discovery.
"""

import logging

import pytest
from host_fakes import FakeField, reference

from refchain.config import DiscoveryConfig
from refchain.schema import SchemaWalker, max_depth


def bundle(discovery, entity_type, bundle_id):
    return discovery[entity_type].bundles[bundle_id]


@pytest.fixture
def discovery(registry, presentations, root_field):
    return SchemaWalker(registry, presentations).discover(root_field)


class TestDiscoveryTermination:
    """Test when the walker refuses to follow a field."""

    def test_non_reference_field_returns_empty(self, registry, presentations):
        """Test that plain fields are never followed."""
        walker = SchemaWalker(registry, presentations)
        assert walker.discover(FakeField("title")) == {}

    def test_non_configurable_field_followed_only_at_root(self, registry, presentations):
        """Test that display configurability is only required below the root."""
        walker = SchemaWalker(registry, presentations)
        hidden = reference("field_owner", "user", display_configurable=False)

        assert "user" in walker.discover(hidden, level=0)
        assert walker.discover(hidden, level=1) == {}

    def test_depth_bound(self, registry, presentations, root_field):
        """Test that cyclic schemas stop at five hops."""
        walker = SchemaWalker(registry, presentations)
        discovery = walker.discover(root_field)

        assert max_depth(discovery) == 5
        assert walker.discover(root_field, level=5) == {}

    def test_custom_depth_bound(self, registry, presentations, root_field):
        """Test that the depth bound comes from the discovery config."""
        walker = SchemaWalker(registry, presentations, config=DiscoveryConfig(max_depth=2))
        assert max_depth(walker.discover(root_field)) == 2

    def test_non_fieldable_target_skipped(self, registry, presentations):
        """Test that targets which cannot hold fields contribute nothing."""
        walker = SchemaWalker(registry, presentations)
        assert walker.discover(reference("field_format", "filter_format")) == {}


class TestDiscoveryContents:
    """Test the discovered tree for the sample content schema."""

    def test_root_node(self, registry, presentations, root_field):
        """Test the root entity type node."""
        discovery = SchemaWalker(registry, presentations).discover(root_field)

        assert list(discovery) == ["node"]
        node = discovery["node"]
        assert node.field is root_field
        assert node.cardinality == -1
        assert node.is_unbounded
        assert list(node.bundles) == ["article"]
        assert node.bundles["article"].label == "Article"

    def test_fields_without_formatters_excluded(self, discovery):
        """Test that a field with no compatible formatter is not offered."""
        article = bundle(discovery, "node", "article")

        assert "field_secret" not in article.fields
        assert "title" in article.fields
        assert set(article.fields["title"].formatters) == {"string", "text_default"}

    def test_relationships_attached_only_when_non_empty(self, discovery):
        """Test that reference fields leading nowhere have no relationship entry."""
        article = bundle(discovery, "node", "article")

        assert set(article.relationships) == {"field_sections", "field_author"}
        # Still offered as a field since reference formatters exist
        assert "field_format" in article.fields

    def test_allow_list_limits_bundles(self, discovery):
        """Test that the target bundle allow-list is honoured."""
        article = bundle(discovery, "node", "article")

        sections = article.relationships["field_sections"]["paragraph"]
        assert list(sections.bundles) == ["text", "gallery"]

    def test_missing_allow_list_uses_all_bundles(self, registry, presentations):
        """Test that every bundle is enumerated without an allow-list."""
        walker = SchemaWalker(registry, presentations)
        discovery = walker.discover(reference("field_any", "node"))

        assert set(discovery["node"].bundles) == {"article", "page"}

    def test_custom_view_mode_enumerates_all_bundles_at_root(
        self, registry, presentations, root_field
    ):
        """Test that the custom view mode ignores the root allow-list."""
        walker = SchemaWalker(registry, presentations, view_mode="_custom")
        discovery = walker.discover(root_field)

        assert set(discovery["node"].bundles) == {"article", "page"}
        sections = discovery["node"].bundles["article"].relationships["field_sections"]
        assert list(sections["paragraph"].bundles) == ["text", "gallery"]

    def test_bundle_without_bundle_entity_type_has_no_label(self, discovery):
        """Test that entity types without bundle config get no bundle label."""
        article = bundle(discovery, "node", "article")
        user = article.relationships["field_author"]["user"]

        assert user.bundles["user"].label is None
        assert user.cardinality == 1

    def test_non_configurable_nested_field_listed_but_not_followed(self, discovery):
        """Test that hidden reference fields stay selectable but are not walked."""
        image = (
            discovery["node"].bundles["article"]
            .relationships["field_sections"]["paragraph"].bundles["text"]
            .relationships["field_media"]["media"].bundles["image"]
        )

        assert "field_owner" in image.fields
        assert "field_owner" not in image.relationships
        assert "field_related" in image.relationships


class TestSchemaAnomalies:
    """Test that broken schema metadata only drops the affected branch."""

    def test_unknown_target_type_skipped(self, registry, presentations, root_field, caplog):
        """Test that a reference to an unknown entity type is skipped."""
        registry.fields[("node", "article")].append(reference("field_broken", "missing"))

        with caplog.at_level(logging.WARNING, logger="refchain.schema.walker"):
            discovery = SchemaWalker(registry, presentations).discover(root_field)

        article = discovery["node"].bundles["article"]
        assert "field_broken" in article.fields
        assert "field_broken" not in article.relationships
        assert "field_sections" in article.relationships
        assert "missing" in caplog.text

    def test_missing_target_type_setting(self, registry, presentations):
        """Test that a reference field without target type yields nothing."""
        field = FakeField("field_bad", field_type="entity_reference")
        assert SchemaWalker(registry, presentations).discover(field) == {}

    def test_failing_bundle_skipped(self, registry, presentations, root_field):
        """Test that a bundle whose fields cannot be listed is dropped alone."""
        registry.failing_bundles.add(("paragraph", "gallery"))
        discovery = SchemaWalker(registry, presentations).discover(root_field)

        sections = discovery["node"].bundles["article"].relationships["field_sections"]
        assert list(sections["paragraph"].bundles) == ["text"]

    def test_malformed_field_descriptor(self, registry, presentations, root_field):
        """Test that a field descriptor missing attributes is skipped."""

        class Broken:
            name = "field_weird"
            label = "Weird"

        registry.fields[("user", "user")].append(Broken())
        discovery = SchemaWalker(registry, presentations).discover(root_field)

        user = discovery["node"].bundles["article"].relationships["field_author"]["user"]
        assert list(user.bundles["user"].fields) == ["name"]
        assert "field_sections" in discovery["node"].bundles["article"].relationships

    def test_empty_type_definition_skipped(self, registry, presentations, root_field):
        """Test that a registry returning no definition only drops that reference."""
        registry.types["ghost"] = None
        registry.fields[("node", "article")].append(reference("field_ghost", "ghost"))

        discovery = SchemaWalker(registry, presentations).discover(root_field)

        article = discovery["node"].bundles["article"]
        assert "field_ghost" in article.fields
        assert "field_ghost" not in article.relationships
        assert set(article.relationships) == {"field_sections", "field_author"}

    def test_handler_settings_not_a_mapping(self, registry, presentations, root_field):
        """Test that unreadable bundle allow-lists only drop that reference."""
        odd = reference("field_odd", "paragraph")
        odd.settings["handler_settings"] = "broken"
        registry.fields[("node", "article")].append(odd)

        discovery = SchemaWalker(registry, presentations).discover(root_field)

        article = discovery["node"].bundles["article"]
        assert "field_odd" not in article.relationships
        assert list(article.relationships["field_sections"]["paragraph"].bundles) == [
            "text",
            "gallery",
        ]

    def test_bundle_label_failure_skips_bundle(self, registry, presentations, root_field):
        """Test that a bundle whose label cannot be loaded is dropped alone."""

        def load_bundle(bundle_entity_type, bundle):
            if bundle == "gallery":
                return object()
            return None

        registry.load_bundle = load_bundle
        discovery = SchemaWalker(registry, presentations).discover(root_field)

        sections = discovery["node"].bundles["article"].relationships["field_sections"]
        assert list(sections["paragraph"].bundles) == ["text"]


class TestPresentationCatalog:
    """Test formatter lookups."""

    def test_formatters_for_field_type(self, presentations):
        """Test compatibility filtering by field type."""
        assert list(presentations.formatters_for("entity_reference")) == [
            "entity_reference_label",
            "entity_reference_entity_view",
        ]
        assert presentations.formatters_for("internal") == {}

    def test_definitions_read_once(self, presentations, presentation_registry):
        """Test that registry definitions are cached per catalog."""
        presentations.formatters_for("string")
        presentations.formatters_for("image")
        assert presentation_registry.definition_calls == 1
