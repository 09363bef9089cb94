from flask import request

MAX_LIMIT = 100


def page_args(default_limit: int = 10):
    page = request.args.get("page", 1)
    limit = request.args.get("limit", default_limit)
    try:
        page = max(1, int(page))
    except (TypeError, ValueError):
        page = 1
    try:
        limit = min(MAX_LIMIT, max(1, int(limit)))
    except (TypeError, ValueError):
        limit = default_limit
    return page, limit


def paginate(query, serializer, default_limit: int = 10, **extra):
    """{success, data, pagination:{page, limit, total, pages}} zarfını üretir."""
    page, limit = page_args(default_limit)
    result = query.paginate(page=page, per_page=limit, error_out=False)
    payload = {
        "success": True,
        "data": [serializer(x) for x in result.items],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": result.total,
            "pages": result.pages,
        },
    }
    payload.update(extra)
    return payload
