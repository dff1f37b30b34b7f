from fastapi import APIRouter

from leave_engine.api.balances import company_balances_router, employee_balances_router
from leave_engine.api.employees import employees_router

api_router = APIRouter()
api_router.include_router(company_balances_router)
api_router.include_router(employee_balances_router)
api_router.include_router(employees_router)
