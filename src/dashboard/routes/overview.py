from fastapi import APIRouter, Depends

from dashboard.deps import blog_service, unwrap
from dashboard.services.blogs import BlogService
from dashboard.services.overview import build_overview

router = APIRouter()


@router.get("/api/overview")
def overview(blogs: BlogService = Depends(blog_service)):
    return {"data": unwrap(build_overview(blogs)).data}
