"""Tests for the custom_syntax example."""


class TestCustomSyntaxApp:
    """Verify ERB-style delimiters and the renamed data parameter."""

    def test_items_rendered(self, example_app) -> None:
        assert "<h1>Cart</h1>" in example_app.output
        assert "<li>Tea: 3</li>" in example_app.output
        assert "<li>Milk: 2</li>" in example_app.output

    def test_total_and_undefined(self, example_app) -> None:
        assert "Total: 5 (n/a)" in example_app.output

    def test_empty_branch(self, example_app) -> None:
        assert "<p>Empty cart</p>" in example_app.empty
        assert "Total: 0" in example_app.empty

    def test_default_syntax_left_as_text(self, example_app) -> None:
        assert "{{=unchanged}}" in example_app.output
