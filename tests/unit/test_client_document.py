"""Tests for assembling bundles into a standalone document."""

from frontend.document import assemble_document


def test_fragments_placed_in_shell():
    doc = assemble_document({"html": "<h1>Hi</h1>", "css": "h1{color:red}", "js": "console.log(1)"})
    assert doc.startswith("<!DOCTYPE html>")
    assert '<meta name="viewport"' in doc
    assert doc.index("<style>") < doc.index("h1{color:red}") < doc.index("</style>")
    assert doc.index("<body>") < doc.index("<h1>Hi</h1>") < doc.index("<script>")
    assert doc.index("<script>") < doc.index("console.log(1)") < doc.index("</script>")


def test_missing_fragments_render_empty():
    doc = assemble_document({"html": "<p>x</p>"})
    assert "None" not in doc
    assert "<p>x</p>" in doc


def test_braces_in_fragments_survive():
    doc = assemble_document({"css": "body { margin: 0 }", "js": "const o = {a: 1};"})
    assert "body { margin: 0 }" in doc
    assert "const o = {a: 1};" in doc
