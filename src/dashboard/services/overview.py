from dashboard.services.base import Outcome
from dashboard.services.blogs import BlogService

RECENT_LIMIT = 5


def build_overview(blogs: BlogService) -> Outcome:
    """Counts per status, total reading time and the most recently updated blogs."""
    fetched = blogs.fetch_blogs()
    if not fetched.ok:
        return fetched

    stats = {
        **blogs.status_counts(),
        "total_reading_time": sum(blog.get("reading_time") or 0 for blog in blogs.items),
    }
    return Outcome(data={"stats": stats, "recent": blogs.items[:RECENT_LIMIT]})
