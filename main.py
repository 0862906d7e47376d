import os
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from fitplan.errors import FitPlanError
from fitplan.routes import goal_routes, plan_routes, progress_routes

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FitPlanError)
async def fitplan_error_handler(request: Request, exc: FitPlanError):
    logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.kind)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "kind": exc.kind})


# Include Routers
app.include_router(plan_routes.router, prefix="/plans", tags=["Plans"])
app.include_router(goal_routes.router, prefix="/goals", tags=["Goals"])
app.include_router(progress_routes.router, prefix="/progress", tags=["Progress"])

@app.get("/")
def read_root():
    return {"message": "Fitness Plan Backend Running!"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
