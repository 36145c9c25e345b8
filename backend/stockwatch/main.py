"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the stockwatch backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and translate service errors to status codes.

Endpoints implemented:
- GET/POST /api/members, GET/PUT/DELETE /api/members/{id}
- GET /api/members/search/email|phone|nationalId
- GET/POST /api/stocks, GET/PUT/DELETE /api/stocks/{id}
- GET /api/stocks/search/code
- GET /api/stock-groups, GET/PUT/DELETE /api/stock-groups/{id}
- POST/GET /api/stock-groups/member/{memberId}
- GET /api/stock-groups/search/name
- POST/DELETE /api/stock-groups/{groupId}/stocks/{stockId}
- GET /api/stock-groups/{groupId}/stocks
- GET /health
"""

from fastapi import FastAPI, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from typing import List
import uvicorn
import json
import logging
import time
import uuid
from .database import create_db_and_tables, get_session
from . import services
from .exceptions import ServiceError, raise_http
from .schemas import (
    MemberCreate,
    MemberRead,
    MemberUpdate,
    StockGroupIn,
    StockGroupRead,
    StockIn,
    StockRead,
)
from .config import settings

app = FastAPI(title="Stockwatch API")
logger = logging.getLogger("stockwatch.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        if request.url.path.startswith("/api"):
            logger.exception(
                "request_failed %s",
                json.dumps(
                    {
                        "request_id": req_id,
                        "path": request.url.path,
                        "method": request.method,
                        "duration_ms": elapsed_ms,
                        "client": request.client.host if request.client else "unknown",
                    },
                    ensure_ascii=True,
                ),
            )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith("/api"):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


def _found(obj, what: str):
    """Return `obj` or raise a 404 naming `what`."""
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{what} not found")
    return obj


@app.get("/health")
def health():
    return {"status": "ok"}


# ---- members ----

@app.get('/api/members', response_model=List[MemberRead])
def list_members(db: Session = Depends(get_session)):
    return services.MemberService(db).list_all()


@app.get('/api/members/search/email', response_model=MemberRead)
def get_member_by_email(email: str, db: Session = Depends(get_session)):
    return _found(services.MemberService(db).get_by_email(email), 'member')


@app.get('/api/members/search/phone', response_model=MemberRead)
def get_member_by_phone_number(phone_number: str = Query(alias='phoneNumber'), db: Session = Depends(get_session)):
    return _found(services.MemberService(db).get_by_phone_number(phone_number), 'member')


@app.get('/api/members/search/nationalId', response_model=MemberRead)
def get_member_by_national_id_number(
    national_id_number: str = Query(alias='nationalIdNumber'), db: Session = Depends(get_session)
):
    return _found(services.MemberService(db).get_by_national_id_number(national_id_number), 'member')


@app.get('/api/members/{member_id}', response_model=MemberRead)
def get_member(member_id: int, db: Session = Depends(get_session)):
    return _found(services.MemberService(db).get(member_id), 'member')


@app.post('/api/members', response_model=MemberRead, status_code=201)
def create_member(payload: MemberCreate, db: Session = Depends(get_session)):
    try:
        return services.MemberService(db).create(payload)
    except ServiceError as e:
        raise_http(e)


@app.put('/api/members/{member_id}', response_model=MemberRead)
def update_member(member_id: int, payload: MemberUpdate, db: Session = Depends(get_session)):
    try:
        return services.MemberService(db).update(member_id, payload)
    except ServiceError as e:
        raise_http(e)


@app.delete('/api/members/{member_id}', status_code=204)
def delete_member(member_id: int, db: Session = Depends(get_session)):
    try:
        services.MemberService(db).delete(member_id)
    except ServiceError as e:
        raise_http(e)
    return Response(status_code=204)


# ---- stocks ----

@app.get('/api/stocks', response_model=List[StockRead])
def list_stocks(db: Session = Depends(get_session)):
    return services.StockService(db).list_all()


@app.get('/api/stocks/search/code', response_model=StockRead)
def get_stock_by_code(code: str, db: Session = Depends(get_session)):
    return _found(services.StockService(db).get_by_code(code), 'stock')


@app.get('/api/stocks/{stock_id}', response_model=StockRead)
def get_stock(stock_id: int, db: Session = Depends(get_session)):
    return _found(services.StockService(db).get(stock_id), 'stock')


@app.post('/api/stocks', response_model=StockRead, status_code=201)
def create_stock(payload: StockIn, db: Session = Depends(get_session)):
    try:
        return services.StockService(db).create(payload)
    except ServiceError as e:
        raise_http(e)


@app.put('/api/stocks/{stock_id}', response_model=StockRead)
def update_stock(stock_id: int, payload: StockIn, db: Session = Depends(get_session)):
    try:
        return services.StockService(db).update(stock_id, payload)
    except ServiceError as e:
        raise_http(e)


@app.delete('/api/stocks/{stock_id}', status_code=204)
def delete_stock(stock_id: int, db: Session = Depends(get_session)):
    try:
        services.StockService(db).delete(stock_id)
    except ServiceError as e:
        raise_http(e)
    return Response(status_code=204)


# ---- stock groups ----

@app.get('/api/stock-groups', response_model=List[StockGroupRead])
def list_stock_groups(db: Session = Depends(get_session)):
    return services.StockGroupService(db).list_all()


@app.get('/api/stock-groups/search/name', response_model=StockGroupRead)
def get_stock_group_by_name(name: str, db: Session = Depends(get_session)):
    return _found(services.StockGroupService(db).get_by_name(name), 'stock group')


@app.get('/api/stock-groups/member/{member_id}', response_model=List[StockGroupRead])
def list_stock_groups_for_member(member_id: int, db: Session = Depends(get_session)):
    # An existing member without groups is reported as 404 as well.
    try:
        groups = services.StockGroupService(db).list_by_member(member_id)
    except ServiceError as e:
        raise_http(e)
    if not groups:
        raise HTTPException(status_code=404, detail=f"no stock groups for member {member_id}")
    return groups


@app.post('/api/stock-groups/member/{member_id}', response_model=StockGroupRead, status_code=201)
def create_stock_group(member_id: int, payload: StockGroupIn, db: Session = Depends(get_session)):
    try:
        return services.StockGroupService(db).create(payload, member_id)
    except ServiceError as e:
        raise_http(e)


@app.get('/api/stock-groups/{group_id}', response_model=StockGroupRead)
def get_stock_group(group_id: int, db: Session = Depends(get_session)):
    return _found(services.StockGroupService(db).get(group_id), 'stock group')


@app.put('/api/stock-groups/{group_id}', response_model=StockGroupRead)
def update_stock_group(group_id: int, payload: StockGroupIn, db: Session = Depends(get_session)):
    try:
        return services.StockGroupService(db).update(group_id, payload)
    except ServiceError as e:
        raise_http(e)


@app.delete('/api/stock-groups/{group_id}', status_code=204)
def delete_stock_group(group_id: int, db: Session = Depends(get_session)):
    try:
        services.StockGroupService(db).delete(group_id)
    except ServiceError as e:
        raise_http(e)
    return Response(status_code=204)


@app.get('/api/stock-groups/{group_id}/stocks', response_model=List[StockRead])
def list_stock_group_stocks(group_id: int, db: Session = Depends(get_session)):
    try:
        return services.StockGroupService(db).list_stocks(group_id)
    except ServiceError as e:
        raise_http(e)


@app.post('/api/stock-groups/{group_id}/stocks/{stock_id}', response_model=StockGroupRead)
def add_stock_to_group(group_id: int, stock_id: int, db: Session = Depends(get_session)):
    try:
        return services.StockGroupService(db).add_stock(group_id, stock_id)
    except ServiceError as e:
        raise_http(e)


@app.delete('/api/stock-groups/{group_id}/stocks/{stock_id}', response_model=StockGroupRead)
def remove_stock_from_group(group_id: int, stock_id: int, db: Session = Depends(get_session)):
    try:
        return services.StockGroupService(db).remove_stock(group_id, stock_id)
    except ServiceError as e:
        raise_http(e)


def run():
    """Run the server with uvicorn on the configured host and port."""
    uvicorn.run("stockwatch.main:app", host=settings.HOST, port=settings.PORT)
