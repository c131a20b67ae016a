"""
Directive classification tests

Tests that each line form maps to the right DirectiveKind and that
attribute names are sanitized.
"""

import pytest

from adocprep.models.directives import DirectiveKind, line_classify, endif_patternMake
from adocprep.lib.attributes import sanitize_attribute_name


class TestLineClassify:
    """Test the single classification step"""

    def test_include(self):
        """include::PATH[] yields the target path"""
        match = line_classify("include::chapters/one.adoc[]\n")
        assert match.kind is DirectiveKind.INCLUDE
        assert match.target == "chapters/one.adoc"

    def test_include_with_trailing_text_is_plain(self):
        """Anything after the brackets makes it ordinary content"""
        assert line_classify("include::one.adoc[] extra\n").kind is DirectiveKind.PLAIN

    @pytest.mark.parametrize("keyword", ["ifdef", "ifndef"])
    def test_conditional_open(self, keyword):
        """ifdef/ifndef carry the keyword and attribute name"""
        match = line_classify(f"{keyword}::draft[]\n")
        assert match.kind is DirectiveKind.CONDITIONAL_OPEN
        assert match.name == "draft"
        assert match.value == keyword

    def test_conditional_close(self):
        """endif lines are classified regardless of name"""
        assert line_classify("endif::draft[]\n").kind is DirectiveKind.CONDITIONAL_CLOSE

    def test_assignment(self):
        """Assignment keeps the raw name and trims the value"""
        match = line_classify(":Author Name:   Jane Doe  \n")
        assert match.kind is DirectiveKind.ATTR_ASSIGN
        assert match.name == "Author Name"
        assert match.value == "Jane Doe"

    def test_assignment_empty_value(self):
        """A value may be empty"""
        match = line_classify(":toc:\n")
        assert match.kind is DirectiveKind.ATTR_ASSIGN
        assert match.value == ""

    def test_deletion(self):
        """:name!: is a deletion, not an assignment"""
        match = line_classify(":toc!:\n")
        assert match.kind is DirectiveKind.ATTR_DELETE
        assert match.name == "toc"

    @pytest.mark.parametrize("line", [
        "plain text\n",
        "\n",
        "// a comment\n",
        "////\n",
        "ifdef::draft\n",
        ": not an attribute\n",
    ])
    def test_plain(self, line):
        """Unrecognised lines are plain content"""
        assert line_classify(line).kind is DirectiveKind.PLAIN


class TestEndifPattern:
    """Test the pattern that ends a conditional skip"""

    def test_matches_named_endif(self):
        """Only the endif for the same name matches"""
        pattern = endif_patternMake("draft")
        assert pattern.match("endif::draft[]\n")
        assert pattern.match("endif::draft[]")
        assert not pattern.match("endif::final[]\n")

    def test_name_is_escaped(self):
        """Regex metacharacters in names are literal"""
        pattern = endif_patternMake("a.b")
        assert pattern.match("endif::a.b[]\n")
        assert not pattern.match("endif::axb[]\n")


class TestSanitizeAttributeName:
    """Test attribute name sanitizing"""

    @pytest.mark.parametrize("name,expected", [
        ("Foo Bar", "foobar"),
        ("foo", "foo"),
        ("Foo 3 #-Billy", "foo3-billy"),
        ("snake_case", "snake_case"),
    ])
    def test_sanitize(self, name, expected):
        """Non-word characters other than '-' are removed, result lowercased"""
        assert sanitize_attribute_name(name) == expected
