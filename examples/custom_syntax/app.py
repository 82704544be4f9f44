"""Custom syntax -- ERB-style delimiters through Settings.

Every directive is a regular expression on the settings record, so a
template language with different delimiters is a settings mapping away.
Directives left at their defaults still use ``{{ }}``.

Run:
    python app.py
"""

from dottpl import Settings, compile_template

ERB = Settings(
    evaluate=r"<%([\s\S]+?)%>",
    interpolate=r"<%=([\s\S]+?)%>",
    conditional=r"<%\?(\?)?\s*([\s\S]*?)\s*%>",
    iterate=r"<%~\s*(?:%>|([\s\S]+?)\s*:\s*(\w+)\s*(?::\s*(\w+))?\s*%>)",
    varname="page",
    undefined="n/a",
)

TEMPLATE = """\
<h1><%= page.title %></h1>
<% total = sum(item["price"] for item in page.cart) %>
<%? page.cart %><ul>
<%~ page.cart :item %>  <li><%= item.name %>: <%= item.price %></li>
<%~%></ul>
<%??%><p>Empty cart</p>
<%?%>Total: <%= total %> (<%= page.currency %>) {{=unchanged}}
"""

render = compile_template(TEMPLATE, ERB)

output = render(
    {
        "title": "Cart",
        "cart": [{"name": "Tea", "price": 3}, {"name": "Milk", "price": 2}],
    }
)
empty = render({"title": "Cart", "cart": []})


def main() -> None:
    print(output)
    print(empty)


if __name__ == "__main__":
    main()
