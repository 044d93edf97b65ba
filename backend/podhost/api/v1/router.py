from fastapi import APIRouter, Depends
from podhost.api.v1.endpoints import channels, podcasts, covers, feed
from podhost.core.security import require_admin

# Management endpoints, behind basic auth when a credential is configured
api_router = APIRouter(dependencies=[Depends(require_admin)])
api_router.include_router(channels.router, tags=["channels"])
api_router.include_router(podcasts.router, tags=["podcasts"])
api_router.include_router(covers.router, tags=["covers"])

# Public endpoints
feed_router = APIRouter()
feed_router.include_router(feed.router, tags=["feed"])
