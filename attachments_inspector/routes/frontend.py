"""
Front-end and editor views

Renders a post through the components' content filters and asset
handlers: the public post view (where ``?attachmentsReport=1`` swaps in the
report mount element) and the block editor screen hosting the panel.
"""

from fastapi import APIRouter, Depends, Path, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from attachments_inspector import PLUGIN_DIR
from attachments_inspector.auth import get_optional_user, require_capability
from attachments_inspector.config import settings
from attachments_inspector.constants.roles import Capability
from attachments_inspector.database import get_db
from attachments_inspector.exceptions import PostNotFoundError
from attachments_inspector.models.post import Post, PostStatus
from attachments_inspector.models.user import User
from attachments_inspector.plugins.base import RenderContext, Screen
from attachments_inspector.plugins.registry import PluginRegistry
from attachments_inspector.services import attachment_service
from attachments_inspector.services.asset_service import AssetRegistry

router = APIRouter(tags=["Views"])

templates = Jinja2Templates(directory=str(PLUGIN_DIR / "templates"))


def get_plugin_registry(request: Request) -> PluginRegistry:
    return request.app.state.plugin_registry


def can_view(post: Post, viewer: User | None) -> bool:
    """Published posts are public; other statuses except trash need edit_posts."""
    if post.status == PostStatus.PUBLISH.value:
        return True
    if post.status == PostStatus.TRASH.value:
        return False
    return viewer is not None and viewer.can(Capability.EDIT_POSTS.value)


def public_query_vars(request: Request, plugins: PluginRegistry) -> dict[str, str]:
    """Query string values for the query variables the components registered."""
    return {name: request.query_params[name] for name in plugins.query_vars() if name in request.query_params}


@router.get("/posts/{post_id}", response_class=HTMLResponse)
async def view_post(
    request: Request,
    post_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db),
    plugins: PluginRegistry = Depends(get_plugin_registry),
    viewer: User | None = Depends(get_optional_user),
):
    """Public post view."""
    post = await attachment_service.get_post(db, post_id)
    if post is None or not can_view(post, viewer):
        raise PostNotFoundError(post_id)

    context = RenderContext(screen=Screen.FRONTEND, post=post, query_vars=public_query_vars(request, plugins))
    assets = AssetRegistry()
    plugins.enqueue_assets(assets, context)
    content = plugins.apply_content_filters(post.content or "", context)

    return templates.TemplateResponse(
        request,
        "post.html",
        {"post": post, "content": content, "assets": assets, "site_name": settings.app_name},
    )


@router.get("/editor/posts/{post_id}", response_class=HTMLResponse)
async def edit_post(
    request: Request,
    post_id: int = Path(..., ge=1),
    screen: str | None = Query(None, description="Set to 'site-editor' for the site editor"),
    db: AsyncSession = Depends(get_db),
    plugins: PluginRegistry = Depends(get_plugin_registry),
    current_user: User = Depends(require_capability(Capability.EDIT_POSTS.value)),
):
    """Block editor shell for a post."""
    post = await attachment_service.get_post(db, post_id)
    if post is None:
        raise PostNotFoundError(post_id)

    editor_screen = Screen.SITE_EDITOR if screen == Screen.SITE_EDITOR.value else Screen.BLOCK_EDITOR
    context = RenderContext(screen=editor_screen, post=post)
    assets = AssetRegistry()
    plugins.enqueue_assets(assets, context)

    return templates.TemplateResponse(
        request,
        "editor.html",
        {
            "post": post,
            "assets": assets,
            "screen": editor_screen.value,
            "user": current_user,
            "api_root": settings.api_namespace,
            "site_name": settings.app_name,
        },
    )
