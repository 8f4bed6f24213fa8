import math

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator

from .exceptions import InvalidArgument


def validate_page(page, limit):
    """Coerce page/limit to ints and reject values outside the allowed range."""
    try:
        page = int(page)
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidArgument("page and limit must be integers.")
    max_limit = getattr(settings, 'CHAT_MAX_PAGE_SIZE', 100)
    if page < 1:
        raise InvalidArgument("page must be 1 or greater.")
    if not 1 <= limit <= max_limit:
        raise InvalidArgument(f"limit must be between 1 and {max_limit}.")
    return page, limit


def paginate(queryset, page, limit):
    """
    Slice an ordered queryset into one page.

    Returns a dict with the page items and its metadata. A page past the end
    is returned empty instead of raising, so clients can stop on an empty
    page.
    """
    page, limit = validate_page(page, limit)
    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    total = paginator.count
    return {
        'items': items,
        'total': total,
        'page': page,
        'limit': limit,
        'total_pages': math.ceil(total / limit),
    }
