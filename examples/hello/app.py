"""Hello World -- the simplest dottpl example.

Compile a template from a string and call the render function with data.
No templates directory needed.

Run:
    python app.py
"""

from dottpl import compile_template

# Compile from string
render = compile_template("Hello, {{=it.name}}!")

# Render with data
output = render({"name": "World"})


def main() -> None:
    print(output)
    print()

    # Multiple renders with different data
    for name in ["dottpl", "doT", "Python"]:
        print(render({"name": name}))


if __name__ == "__main__":
    main()
