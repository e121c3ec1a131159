from fastapi import APIRouter

from dashboard.api.v1.endpoints.alerts import router as alerts_router
from dashboard.api.v1.endpoints.health import router as health_router
from dashboard.api.v1.endpoints.jobs import router as jobs_router
from dashboard.api.v1.endpoints.market_data import router as market_data_router
from dashboard.api.v1.endpoints.portfolios import router as portfolios_router
from dashboard.api.v1.endpoints.watchlists import router as watchlists_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(market_data_router, tags=["market-data"])
api_router.include_router(watchlists_router, prefix="/watchlists", tags=["watchlists"])
api_router.include_router(portfolios_router, prefix="/portfolios", tags=["portfolios"])
api_router.include_router(alerts_router, prefix="/alerts", tags=["alerts"])
api_router.include_router(jobs_router, prefix="/jobs", tags=["jobs"])
