from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import advisor, dashboard, materials, projects, reports
from .config import settings

cors_origins = list(settings.cors_allow_origins)

app = FastAPI(title="SiteDesk API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(dashboard.router)
app.include_router(projects.router)
app.include_router(materials.router)
app.include_router(reports.router)
app.include_router(advisor.router)

print(
    f"[sitedesk] started: ai={'on' if settings.can_use_ai else 'off'} "
    f"range_policy={settings.numeric_range_policy} seed_demo={settings.seed_demo_data}"
)


@app.get("/")
def read_root():
    return {"message": "Welcome to SiteDesk API!"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
