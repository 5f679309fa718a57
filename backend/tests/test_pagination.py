from utils.pagination import ELLIPSIS, page_links, total_pages


def test_total_pages():
    assert total_pages(0, 10) == 0
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2
    assert total_pages(5, 0) == 0


def test_short_ranges_list_every_page():
    assert page_links(1, 0) == []
    assert page_links(1, 1) == [1]
    assert page_links(4, 7) == [1, 2, 3, 4, 5, 6, 7]


def test_gaps_collapse_to_ellipsis():
    assert page_links(1, 10) == [1, 2, ELLIPSIS, 10]
    assert page_links(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]
    assert page_links(10, 10) == [1, ELLIPSIS, 9, 10]


def test_single_skipped_page_is_shown():
    assert page_links(3, 10) == [1, 2, 3, 4, ELLIPSIS, 10]
    assert page_links(4, 8) == [1, 2, 3, 4, 5, ELLIPSIS, 8]
