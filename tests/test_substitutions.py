"""
Substitution engine and document tests

Tests the named substitution steps, composite expansion and the default
Document's overrides and backend handling.
"""

import pytest

from adocprep.lib.document import Document
from adocprep.lib.substitutions import Substitutor, COMPOSITE_SUBS, legalSubs_names


@pytest.fixture
def substitutor():
    return Substitutor()


class TestSubsExpand:
    """Test composite name expansion"""

    def test_composite_expands(self, substitutor):
        """Composite names expand to their members in order"""
        assert substitutor.subs_expand(["normal"]) == COMPOSITE_SUBS["normal"]

    def test_mixed_and_deduplicated(self, substitutor):
        """Single names mix with composites, duplicates removed"""
        assert substitutor.subs_expand(["verbatim", "quotes", "specialcharacters"]) == [
            "specialcharacters",
            "quotes",
        ]

    def test_unknown_dropped(self, substitutor):
        """Unknown names are ignored"""
        assert substitutor.subs_expand(["bogus", "none"]) == []

    def test_legal_names(self):
        """Composite keys and normal members are legal for pass macros"""
        legal = legalSubs_names()
        assert "normal" in legal
        assert "verbatim" in legal
        assert "quotes" in legal
        assert "bogus" not in legal


class TestSubstitutionSteps:
    """Test individual substitution steps"""

    def test_specialcharacters(self, substitutor):
        """&, < and > become entities"""
        assert substitutor.apply_subs("a < b & c > d", ["specialcharacters"], {}) == \
            "a &lt; b &amp; c &gt; d"

    def test_quotes(self, substitutor):
        """Constrained quotes become tags"""
        result = substitutor.apply_subs("*bold* and _em_ and `code`", ["quotes"], {})
        assert result == "<strong>bold</strong> and <em>em</em> and <code>code</code>"

    def test_quotes_not_inside_words(self, substitutor):
        """Marks inside words are left alone"""
        assert substitutor.apply_subs("snake_case_name", ["quotes"], {}) == "snake_case_name"

    def test_attributes(self, substitutor):
        """Defined references are replaced, undefined kept"""
        result = substitutor.apply_subs("{a} {missing}", ["attributes"], {"a": "1"})
        assert result == "1 {missing}"

    def test_escaped_attribute_reference(self, substitutor):
        """A backslash keeps the reference literal"""
        assert substitutor.apply_subs("\\{a}", ["attributes"], {"a": "1"}) == "{a}"

    def test_replacements(self, substitutor):
        """Typographic replacements"""
        result = substitutor.apply_subs("(C) (R) (TM) a -- b wait...", ["replacements"], {})
        assert result == "&#169; &#174; &#8482; a &#8212; b wait&#8230;"

    def test_post_replacements(self, substitutor):
        """A trailing ' +' becomes a line break"""
        assert substitutor.apply_subs("line +", ["post_replacements"], {}) == "line<br>"

    def test_normal(self, substitutor):
        """The normal set runs every step"""
        assert substitutor.apply_subs("(C) {owner}", ["normal"], {"owner": "ACME"}) == "&#169; ACME"

    def test_header_subs(self, substitutor):
        """Header substitutions escape and resolve references only"""
        assert substitutor.apply_header_subs("*{a}* & (C)", {"a": "x"}) == "*x* &amp; (C)"


class TestConditionalRefs:
    """Test {name?text} resolution"""

    def test_multiple_tokens(self, substitutor):
        """Every token on the line is rewritten"""
        line = "{a?A}{b?B}{a?A}\n"
        assert substitutor.conditional_refs_resolve(line, {"a": ""}) == "AA\n"

    def test_empty_text(self, substitutor):
        """A token with no text resolves to nothing either way"""
        assert substitutor.conditional_refs_resolve("x{a?}y", {"a": "1"}) == "xy"

    def test_no_tokens(self, substitutor):
        """Lines without tokens are returned unchanged"""
        assert substitutor.conditional_refs_resolve("{a} text\n", {"a": "1"}) == "{a} text\n"


class TestDocument:
    """Test the default document collaborator"""

    def test_default_backend(self):
        """A new document starts on the default backend"""
        document = Document()
        assert document.attributes["backend"] == "html5"
        assert document.attributes["basebackend"] == "html"
        assert document.attributes["outfilesuffix"] == ".html"
        assert "backend-html5" in document.attributes

    def test_overrides_applied(self):
        """Overrides set and unset attributes on construction"""
        document = Document(attributes={"toc": ""}, overrides={"author": "Jane", "toc!": ""})
        assert document.attributes["author"] == "Jane"
        assert "toc" not in document.attributes

    def test_backend_override(self):
        """Overriding backend recomputes derived attributes"""
        document = Document(overrides={"backend": "docbook45"})
        assert document.attributes["basebackend"] == "docbook"
        assert "backend-html5" not in document.attributes

    def test_apply_subs_uses_document_attributes(self):
        """Document substitutions see its own attributes"""
        document = Document(attributes={"name": "Widget"})
        assert document.apply_subs("{name} <x>", ["normal"]) == "Widget &lt;x&gt;"
        assert document.apply_header_subs("{name}") == "Widget"
