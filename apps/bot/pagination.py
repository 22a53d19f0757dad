import math
from dataclasses import dataclass


@dataclass
class Page:
    items: list
    number: int
    total_pages: int
    total_items: int
    offset: int

    @property
    def has_previous(self):
        return self.number > 1

    @property
    def has_next(self):
        return self.number < self.total_pages


def paginate(items, page, page_size):
    """
    Cuts items into 1-based pages. Out-of-range page numbers are clamped to
    the first or last page.
    """
    items = list(items)
    total_pages = max(1, math.ceil(len(items) / page_size))
    number = min(max(1, int(page)), total_pages)
    offset = (number - 1) * page_size
    return Page(
        items=items[offset:offset + page_size],
        number=number,
        total_pages=total_pages,
        total_items=len(items),
        offset=offset,
    )
