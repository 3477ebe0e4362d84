"""Assemble a generated bundle into one standalone HTML document."""

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Generated Website</title>
  <style>
    {css}
  </style>
</head>
<body>
  {html}
  <script>
    {js}
  </script>
</body>
</html>"""


def assemble_document(bundle: dict) -> str:
    """Wrap html/css/js fragments in the fixed document shell.

    Missing or null fragments render as empty strings.
    """
    return DOCUMENT_TEMPLATE.format(
        html=bundle.get("html") or "",
        css=bundle.get("css") or "",
        js=bundle.get("js") or "",
    )
