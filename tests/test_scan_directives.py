from glsl_include.core.scan.scan_directives import scan_directives


def _names(text: str) -> list[str]:
    return [d.name for d in scan_directives(text)]


def test_angle_and_quote_directives():
    src = '#include <A.glsl>\n#include "B.glsl"\nvoid main() {}'
    ds = list(scan_directives(src))

    assert [d.name for d in ds] == ["A.glsl", "B.glsl"]
    assert [d.line for d in ds] == [0, 1]
    assert (ds[0].start, ds[0].end, ds[0].line_end) == (0, 17, 17)
    assert (ds[1].start, ds[1].end, ds[1].line_end) == (18, 35, 35)
    assert src[ds[1].start : ds[1].end] == '#include "B.glsl"'


def test_pragma_include():
    assert _names('#pragma include "A.glsl"') == ["A.glsl"]
    assert _names('  #  pragma   include <lib/B.glsl>') == ["lib/B.glsl"]


def test_pragma_must_be_a_whole_token():
    assert _names('#pragmapragma include "A"') == []
    assert _names('#pragmainclude "A"') == []


def test_include_needs_whitespace_before_name():
    assert _names("#include<A.glsl>") == []
    assert _names("#includes <A.glsl>") == []


def test_leading_and_trailing_whitespace():
    src = "  #  include   <A.glsl>   \nx"
    (d,) = list(scan_directives(src))
    assert d.name == "A.glsl"
    assert d.start == 2
    assert d.end == 26
    assert d.line_end == 26


def test_trailing_text_is_left_outside_the_span():
    src = "#include <A.glsl> // helpers"
    (d,) = list(scan_directives(src))
    assert src[d.end : d.line_end] == "// helpers"


def test_comments_are_skipped():
    src = (
        "// #include <A.glsl>\n"
        "/* #include <B.glsl>\n"
        "#include <C.glsl> */\n"
        "#include <D.glsl>\n"
    )
    ds = list(scan_directives(src))
    assert [d.name for d in ds] == ["D.glsl"]
    assert ds[0].line == 3


def test_unterminated_block_comment_hides_the_rest():
    assert _names("/* #include <A.glsl>\n#include <B.glsl>") == []


def test_text_before_hash_does_not_prevent_match():
    src = "foo(); #include <A.glsl>"
    (d,) = list(scan_directives(src))
    assert d.name == "A.glsl"
    assert d.start == src.index("#")


def test_several_directives_on_one_line():
    src = "#include <A.glsl> #include <B.glsl>\nx"
    ds = list(scan_directives(src))

    assert [(d.name, d.line) for d in ds] == [("A.glsl", 0), ("B.glsl", 0)]
    assert ds[0].end == ds[1].start == 18
    assert ds[0].line_end == ds[1].line_end == 35


def test_directive_after_block_comment_on_same_line():
    src = "/* header */ #include <A.glsl>\n/* a\n b */ #include <B.glsl>"
    ds = list(scan_directives(src))
    assert [(d.name, d.line) for d in ds] == [("A.glsl", 0), ("B.glsl", 2)]


def test_unterminated_or_empty_names_do_not_match():
    assert _names("#include <A.glsl\nvoid main() {}") == []
    assert _names('#include "A.glsl>') == []
    assert _names("#include <>") == []


def test_other_directives_are_passed_over():
    src = "#version 450\n#define X 1\n#include <A.glsl>\n"
    ds = list(scan_directives(src))
    assert [d.name for d in ds] == ["A.glsl"]
    assert ds[0].line == 2


def test_crlf_line_endings():
    src = '#include <A.glsl>\r\nvoid main() {}\r\n#include "B.glsl"'
    ds = list(scan_directives(src))
    assert [d.line for d in ds] == [0, 2]
    assert ds[0].end == ds[0].line_end == 18


def test_line_numbers_after_multiline_block_comment():
    ds = list(scan_directives("/*\n\n*/\n#include <A.glsl>"))
    assert [(d.name, d.line) for d in ds] == [("A.glsl", 3)]


def test_scanner_is_lazy_and_not_restartable():
    it = scan_directives("#include <A>\n#include <B>\n#include <C>")
    assert next(it).name == "A"
    assert [d.name for d in it] == ["B", "C"]
    assert list(it) == []
