"""Partials -- compile-time snippets shared between templates.

``.def`` files hold snippets. ``fields.def`` defines a parameterized
snippet when used, so ``{{#def.field:email}}`` splices a copy of it with
``f`` replaced by ``email``. Snippets are resolved once, while compiling,
and the render function contains no trace of them.

Run:
    python app.py
"""

from pathlib import Path

from dottpl import compile_source, compile_template_with_defs
from dottpl.cli import load_definitions

templates_dir = Path(__file__).parent / "templates"

# {"fields": "{{##def.field:f:...#}}", "layout": "<header>..."}
defs = load_definitions(templates_dir)

form_text = (templates_dir / "form.dot").read_text(encoding="utf-8")
render = compile_template_with_defs(form_text, defs, filename="form.dot")

data = {
    "site": "Example",
    "title": "Contact",
    "labels": {"email": "E-mail", "phone": "Phone"},
    "values": {"email": "ada@example.com"},
}
output = render(data)

# Generated Python, for inspection
source = compile_source(form_text, load_definitions(templates_dir))


def main() -> None:
    print(output)
    print(source)


if __name__ == "__main__":
    main()
