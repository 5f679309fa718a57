import math
from typing import List, Union

ELLIPSIS = "..."


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


def page_links(current_page: int, total_pages: int, delta: int = 1) -> List[Union[int, str]]:
    """
    Page numbers to show in a paginator.

    Up to seven pages are listed in full. Beyond that the first and last page
    and `delta` neighbours of the current page are kept; a single skipped page
    is shown as its number, longer gaps collapse to "...".
    """
    if total_pages <= 7:
        return list(range(1, total_pages + 1))

    left = current_page - delta
    right = current_page + delta
    kept = [i for i in range(1, total_pages + 1) if i == 1 or i == total_pages or left <= i <= right]

    links = []
    previous = None
    for page in kept:
        if previous is not None:
            if page - previous == 2:
                links.append(previous + 1)
            elif page - previous != 1:
                links.append(ELLIPSIS)
        links.append(page)
        previous = page
    return links
