import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import OptimizerConfig, SolverCredentials, get_default_config, setup_logging
from .errors import InvalidRequestError
from .models import OptimizationRequest
from .optimization import optimize_request
from .solver import GoogleRouteOptimizationSolver, RouteSolver

logger = logging.getLogger(__name__)


def create_app(solver: Optional[RouteSolver] = None, config: Optional[OptimizerConfig] = None) -> FastAPI:
    """
    Build the API. Without an explicit solver, the Google solver is created
    at startup from environment credentials; missing credentials abort startup.
    """
    config = config or get_default_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.solver is None:
            credentials = SolverCredentials.from_env()
            app.state.solver = GoogleRouteOptimizationSolver(credentials, config)
            logger.info("Route solver ready for project %s", credentials.project_id)
        yield

    app = FastAPI(title="Shuttle Route Optimization", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"]
    )
    app.state.solver = solver
    app.state.config = config

    _register_routes(app)
    return app


def get_solver(request: Request) -> RouteSolver:
    return request.app.state.solver


def get_config(request: Request) -> OptimizerConfig:
    return request.app.state.config


def _register_routes(app: FastAPI) -> None:

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    # --- OPTIMIZATION API ---
    @app.post("/api/optimize")
    async def optimize(
        req: OptimizationRequest,
        include_pickups: bool = False,
        solver: RouteSolver = Depends(get_solver),
        config: OptimizerConfig = Depends(get_config),
    ):
        """
        Takes the bookings and the fleet, asks the solver for routes,
        and returns the summary, per-visit detail and legacy response.
        """
        logger.info("Received optimization request")
        try:
            return await optimize_request(req, solver, config, include_pickups=include_pickups)
        except InvalidRequestError as e:
            logger.info("Rejected optimization request: %s", e)
            return JSONResponse(
                status_code=400,
                content={"status": "error", "error": str(e), "details": "Invalid optimization request"},
            )
        except Exception as e:
            logger.exception("Error in route optimization request")
            return JSONResponse(
                status_code=500,
                content={
                    "status": "error",
                    "error": str(e),
                    "details": str(getattr(e, "details", None) or "No additional details available"),
                },
            )


app = create_app()

if __name__ == "__main__":
    setup_logging()
    uvicorn.run(app, host="0.0.0.0", port=8005)
