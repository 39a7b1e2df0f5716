"""
FastAPI routers grouped by domain (projects, users, auth, stats, settings).

Each file exposes an APIRouter included by ``soloquest.app.create_app``.
Routers reach the DatabaseClient through ``deps.get_db``.
"""
