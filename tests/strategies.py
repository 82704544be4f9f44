"""Shared hypothesis strategies for dottpl property-based testing.

- **Text**: literal template text that cannot contain a directive
- **Values**: data values and the text ``str()`` gives for them
- **Templates**: literal text interleaved with interpolations of known fields
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Text strategies
# ---------------------------------------------------------------------------

# Every default directive starts with "{{", so text without "{" is inert.
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),  # no surrogates
        blacklist_characters="{",
    ),
    min_size=0,
    max_size=200,
)

# Text exercising the characters the compiler must escape.
tricky_text = st.text(
    alphabet=st.sampled_from(list("ab '\"\\\n\r\t\x00\x1b}#/*%")),
    min_size=1,
    max_size=60,
)

# ---------------------------------------------------------------------------
# Value strategies
# ---------------------------------------------------------------------------

field_name = st.sampled_from(["a", "b", "name", "count", "title", "value"])

scalar_value = st.one_of(
    st.integers(min_value=-(10**6), max_value=10**6),
    st.booleans(),
    plain_text,
)

# ---------------------------------------------------------------------------
# Template strategies
# ---------------------------------------------------------------------------

# (template, data, expected) built from literal text and interpolations.
interpolated_template = st.lists(
    st.one_of(
        plain_text.map(lambda s: ("text", s)),
        field_name.map(lambda f: ("field", f)),
    ),
    min_size=1,
    max_size=6,
)
