from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator

MAX_PER_PAGE = 100


def parse_per_page(value, default):
    try:
        per_page = int(value)
    except (TypeError, ValueError):
        return default
    return min(max(per_page, 1), MAX_PER_PAGE)


def paginate(queryset, page, per_page, serialize):
    """
    Paginate a queryset into the JSON shape the frontend expects:
    data, current_page, last_page, per_page, total, from, to.
    Out-of-range pages fall back to the last page.
    """
    paginator = Paginator(queryset, per_page)
    try:
        page_obj = paginator.page(page)
    except PageNotAnInteger:
        page_obj = paginator.page(1)
    except EmptyPage:
        page_obj = paginator.page(paginator.num_pages)

    items = [serialize(obj) for obj in page_obj.object_list]
    return {
        'data': items,
        'current_page': page_obj.number,
        'last_page': paginator.num_pages,
        'per_page': per_page,
        'total': paginator.count,
        'from': page_obj.start_index() if items else None,
        'to': page_obj.end_index() if items else None,
    }
