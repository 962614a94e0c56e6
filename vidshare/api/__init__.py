from fastapi import APIRouter
from vidshare.api import auth, catalog, comments, studio, suggestions, videos, webhooks

api_router = APIRouter()

api_router.include_router(auth.auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(videos.videos_router, prefix="/videos", tags=["videos"])
api_router.include_router(comments.comments_router, prefix="/comments", tags=["comments"])
api_router.include_router(studio.studio_router, prefix="/studio", tags=["studio"])
api_router.include_router(suggestions.suggestions_router, prefix="/suggestions", tags=["suggestions"])
api_router.include_router(catalog.categories_router, prefix="/categories", tags=["categories"])
api_router.include_router(catalog.subscriptions_router, prefix="/subscriptions", tags=["subscriptions"])
api_router.include_router(webhooks.webhooks_router, prefix="/webhooks", tags=["webhooks"])

__all__ = ["api_router"]
