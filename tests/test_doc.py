"""Width-aware document rendering."""

from oas_generator.emission.doc import (
    concat,
    group,
    hardline,
    if_break,
    intersperse,
    line,
    nest,
    render,
    softline,
    text,
)

ITEMS = ["alpha", "beta", "gamma"]


def _list_doc(items: list[str]):
    return group(
        text("["),
        nest(2, softline(), intersperse(concat(text(","), line()), [text(item) for item in items]), if_break(text(","))),
        softline(),
        text("]"),
    )


class TestRender:
    def test_group_stays_flat_when_it_fits(self) -> None:
        assert render(_list_doc(ITEMS), 80) == "[alpha, beta, gamma]"

    def test_group_breaks_when_too_wide(self) -> None:
        assert render(_list_doc(ITEMS), 10) == "[\n  alpha,\n  beta,\n  gamma,\n]"

    def test_exact_width_fits(self) -> None:
        doc = _list_doc(ITEMS)
        assert render(doc, len("[alpha, beta, gamma]")) == "[alpha, beta, gamma]"
        assert "\n" in render(doc, len("[alpha, beta, gamma]") - 1)

    def test_hardline_forces_enclosing_group_to_break(self) -> None:
        doc = group(text("a"), line(), text("b"), hardline(), text("c"))
        assert render(doc, 80) == "a\nb\nc"

    def test_trailing_text_counts_towards_fit(self) -> None:
        doc = concat(_list_doc(["a", "b"]), text(" " + "x" * 20))
        assert render(doc, 20).startswith("[\n")

    def test_broken_lines_have_no_trailing_spaces(self) -> None:
        doc = group(text("key: "), line(), text("value"))
        assert render(doc, 5) == "key:\nvalue"

    def test_nested_groups_break_outermost_first(self) -> None:
        inner = group(text("("), nest(2, softline(), text("x, y")), softline(), text(")"))
        outer = group(text("call"), nest(2, line(), inner))
        assert render(outer, 10) == "call\n  (x, y)"
