"""Loop context -- index, position and length inside {{~ }} blocks.

Demonstrates the index variable of an iterate block for styling
first/last rows, row numbers, and progress indicators.

Run:
    python app.py
"""

from pathlib import Path

from dottpl import compile_template

template_path = Path(__file__).parent / "templates" / "table.dot"
render = compile_template(template_path.read_text(encoding="utf-8"), filename="table.dot")

items = ["Alpha", "Beta", "Gamma", "Delta"]
output = render({"items": items})

# Same template with whitespace between tags collapsed
compact = compile_template(
    template_path.read_text(encoding="utf-8"), {"strip": True}, filename="table.dot"
)({"items": items})


def main() -> None:
    print(output)
    print(compact)


if __name__ == "__main__":
    main()
