"""
Tests for the list/query contract:
- page/limit parsing and fallbacks
- search and equality filter construction
- pagination envelope
"""
import pytest

from queries import (
    BERITA_LIST,
    GALERI_LIST,
    LAPORAN_LIST,
    build_pagination,
    parse_positive_int,
)


@pytest.mark.parametrize("value, expected", [
    ("3", 3),
    (" 7 ", 7),
    (None, 1),
    ("", 1),
    ("abc", 1),
    ("0", 1),
    ("-4", 1),
    ("2.5", 1),
    ("99999999999999999999", 2 ** 31 - 1),
])
def test_parse_positive_int_falls_back_to_default(value, expected):
    assert parse_positive_int(value, 1) == expected


def test_defaults_per_resource():
    assert BERITA_LIST.parse({}).limit == 10
    assert GALERI_LIST.parse({}).limit == 12
    assert LAPORAN_LIST.parse({}).limit == 10
    assert BERITA_LIST.parse({}).page == 1


def test_limit_cap_only_when_given():
    assert BERITA_LIST.parse({"limit": "500"}).limit == 500
    assert BERITA_LIST.parse({"limit": "500"}, max_limit=100).limit == 100
    assert BERITA_LIST.parse({"limit": "20"}, max_limit=100).limit == 20


def test_skip_from_page_and_limit():
    params = BERITA_LIST.parse({"page": "3", "limit": "10"})
    assert params.skip == 20


def test_search_builds_case_insensitive_or_over_text_fields():
    params = LAPORAN_LIST.parse({"search": "  jalan rusak "})
    query = LAPORAN_LIST.build_query(params)

    assert params.search == "jalan rusak"
    fields = [list(clause.keys())[0] for clause in query["$or"]]
    assert fields == ["nama", "email", "message"]
    for clause in query["$or"]:
        condition = list(clause.values())[0]
        assert condition["$options"] == "i"


def test_search_text_is_escaped():
    params = BERITA_LIST.parse({"search": "a.b(c"})
    query = BERITA_LIST.build_query(params)
    assert query["$or"][0]["title"]["$regex"] == r"a\.b\(c"


def test_blank_search_adds_no_filter():
    params = GALERI_LIST.parse({"search": "   "})
    assert GALERI_LIST.build_query(params) == {}


def test_equality_filters_ignore_values_outside_enum():
    assert LAPORAN_LIST.parse({"status": "resolved"}).filters == {"status": "resolved"}
    assert LAPORAN_LIST.parse({"status": "deleted"}).filters == {}
    assert GALERI_LIST.parse({"type": "audio"}).filters == {}
    assert GALERI_LIST.parse({"published": "maybe"}).filters == {}


def test_published_filter_is_coerced_to_bool():
    assert BERITA_LIST.parse({"published": "true"}).filters == {"published": True}
    assert BERITA_LIST.parse({"published": "false"}).filters == {"published": False}


def test_base_filters_override_query_string():
    params = GALERI_LIST.parse(
        {"published": "false", "type": "video"},
        base_filters={"published": True},
    )
    assert params.filters == {"published": True, "type": "video"}


def test_pagination_middle_page():
    assert build_pagination(2, 10, 25) == {
        "page": 2,
        "limit": 10,
        "total": 25,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": True,
    }


def test_pagination_empty_result():
    pagination = build_pagination(1, 10, 0)
    assert pagination["totalPages"] == 0
    assert pagination["hasNext"] is False
    assert pagination["hasPrev"] is False


def test_pagination_last_page():
    pagination = build_pagination(3, 10, 25)
    assert pagination["hasNext"] is False
    assert pagination["hasPrev"] is True
