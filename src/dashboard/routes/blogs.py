"""Dashboard blog routes: list / create / update / delete / publish under /api/blogs."""

from fastapi import APIRouter, Depends, Query, status

from dashboard.deps import blog_service, mutation_response, unwrap
from dashboard.services.blogs import BlogService
from shared.models import BlogCreate, BlogFilter, BlogUpdate

router = APIRouter()


@router.get("/api/blogs")
def list_blogs(
    status_filter: BlogFilter = Query("all", alias="status"),
    blogs: BlogService = Depends(blog_service),
):
    unwrap(blogs.fetch_blogs())
    return {"data": blogs.filter_blogs(status_filter), "counts": blogs.status_counts()}


@router.post("/api/blogs", status_code=status.HTTP_201_CREATED)
def create_blog(blog: BlogCreate, blogs: BlogService = Depends(blog_service)):
    return mutation_response(blogs.create_blog(blog), blogs.items)


@router.put("/api/blogs/{blog_id}")
def update_blog(blog_id: str, changes: BlogUpdate, blogs: BlogService = Depends(blog_service)):
    return mutation_response(blogs.update_blog(blog_id, changes), blogs.items)


@router.delete("/api/blogs/{blog_id}")
def delete_blog(blog_id: str, blogs: BlogService = Depends(blog_service)):
    return mutation_response(blogs.delete_blog(blog_id), blogs.items)


@router.post("/api/blogs/{blog_id}/publish")
def publish_blog(blog_id: str, blogs: BlogService = Depends(blog_service)):
    return mutation_response(blogs.publish_blog(blog_id), blogs.items)


@router.post("/api/blogs/{blog_id}/unpublish")
def unpublish_blog(blog_id: str, blogs: BlogService = Depends(blog_service)):
    return mutation_response(blogs.unpublish_blog(blog_id), blogs.items)
