"""
Unit tests for the event listing filter builder.
"""

from eventboard_api.app.services.event_service import build_filters


def test_no_filters():
    assert build_filters() == ("", [])
    assert build_filters(search="   ", category="") == ("", [])


def test_category_all_is_ignored():
    assert build_filters(category="All") == ("", [])


def test_category_filter():
    where, params = build_filters(category="Sports")

    assert where == " WHERE e.category = ?"
    assert params == ["Sports"]


def test_search_terms_are_ored_across_fields():
    where, params = build_filters(search="jazz  night")

    assert where.count("LIKE ?") == 6
    assert ") OR (" in where
    assert params == ["%jazz%"] * 3 + ["%night%"] * 3


def test_search_escapes_like_wildcards():
    _, params = build_filters(search="100%_off")

    assert params[0] == "%100\\%\\_off%"


def test_search_and_category_are_anded():
    where, params = build_filters(search="jazz", category="Cultural")

    assert " AND e.category = ?" in where
    assert params[-1] == "Cultural"
