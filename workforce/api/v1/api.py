# workforce/api/v1/api.py
from fastapi import APIRouter

from workforce.api.v1.endpoints import admin, attendance, auth, employee, task

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(employee.router, tags=["Employee"])
api_router.include_router(attendance.router, tags=["Attendance"])
api_router.include_router(task.router, tags=["Task"])
api_router.include_router(admin.router, tags=["Admin"])
