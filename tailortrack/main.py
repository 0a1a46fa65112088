import logging
from typing import Callable, List, Optional

from fastapi import FastAPI, Depends, BackgroundTasks, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .deps import init_db, get_store, get_settings, get_gateway, get_fallback, settings, Settings
from .errors import TrackerError, ValidationError, InternalError
from .filters import OrderFilter, filter_orders, delivery_stats, recent_orders
from .models import utcnow
from .schemas import (
    OrderCreate, OrderUpdate, OrderOut,
    StaffBookCreate, StaffBookOut,
    EntryStatusCreate, EntryStatusOut,
    DeliveryStats, SyncStatus,
)
from .services import OrderService, EntryStatusService, format_errors
from .store import Store
from .sync import SyncGateway, LocalFallback, build_snapshot, push_snapshot, background_sync

logger = logging.getLogger(__name__)

app = FastAPI(title="Tailor Order Tracker")


# ---------- Errors ----------
@app.exception_handler(TrackerError)
def tracker_error(request: Request, exc: TrackerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
def request_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": format_errors(exc.errors())})


@app.exception_handler(Exception)
def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    err = InternalError("Internal server error")
    return JSONResponse(status_code=err.status_code, content={"message": err.message})


# ---------- Lifecycle ----------
@app.on_event("startup")
def on_startup():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    logger.info("External sync %s", "configured" if get_gateway().configured else "not configured")


# ---------- Helpers ----------
def get_autosync(
    background_tasks: BackgroundTasks,
    store: Store = Depends(get_store),
    cfg: Settings = Depends(get_settings),
    gateway: SyncGateway = Depends(get_gateway),
    fallback: LocalFallback = Depends(get_fallback),
) -> Callable[[], None]:
    """
    Returns a callable that queues a best-effort backup of the current state.
    The snapshot is taken inside the request; only the upload runs afterwards.
    """
    def trigger():
        if cfg.AUTO_SYNC:
            background_tasks.add_task(background_sync, gateway, fallback, build_snapshot(store))
    return trigger


# ---------- Orders ----------
@app.get("/orders", response_model=List[OrderOut])
def list_orders(
    sno: Optional[str] = None,
    product: Optional[str] = None,
    status: Optional[str] = None,
    window: Optional[str] = None,
    order: Optional[str] = None,
    store: Store = Depends(get_store),
):
    criteria = OrderFilter(
        serial_contains=sno,
        product_contains=product,
        status=status,
        date_window=window,
        date_order=order,
    )
    return filter_orders(store.list_orders(), criteria)


@app.get("/orders/recent", response_model=List[OrderOut])
def list_recent_orders(limit: int = 10, store: Store = Depends(get_store)):
    if limit < 1:
        raise ValidationError("limit must be positive")
    return recent_orders(store.list_orders(), limit)


@app.get("/orders/{sno}", response_model=OrderOut)
def get_order(sno: str, store: Store = Depends(get_store)):
    return OrderService(store).get_order(sno.strip())


@app.post("/orders", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    o = OrderService(store).create_order(payload)
    autosync()
    return o


@app.put("/orders/{sno}", response_model=OrderOut)
def update_order(sno: str, payload: OrderUpdate, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    o = OrderService(store).update_order(sno.strip(), payload)
    autosync()
    return o


@app.delete("/orders/{sno}", status_code=204)
def delete_order(sno: str, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    OrderService(store).delete_order(sno.strip())
    autosync()
    return Response(status_code=204)


# ---------- Staff book ----------
@app.get("/staff-book", response_model=List[StaffBookOut])
def list_staff_book(store: Store = Depends(get_store)):
    return store.list_staff_book()


@app.post("/staff-book", response_model=StaffBookOut, status_code=201)
def create_staff_book(payload: StaffBookCreate, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    sb = store.create_staff_book(payload.model_dump())
    logger.info("Billbook %s assigned to %s", sb.billbook_range, sb.staff_name)
    autosync()
    return sb


@app.delete("/staff-book/{billbook_range}", status_code=204)
def delete_staff_book(billbook_range: str, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    store.delete_staff_book(billbook_range.strip())
    autosync()
    return Response(status_code=204)


# ---------- Entry status ----------
@app.get("/entry-status", response_model=List[EntryStatusOut])
def list_entry_statuses(store: Store = Depends(get_store)):
    return store.list_entry_statuses()


@app.get("/entry-status/{sno}", response_model=List[EntryStatusOut])
def list_entry_statuses_for_order(sno: str, store: Store = Depends(get_store)):
    return EntryStatusService(store).list_by_serial(sno.strip())


@app.post("/entry-status", response_model=EntryStatusOut, status_code=201)
def create_entry_status(payload: EntryStatusCreate, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    es = EntryStatusService(store).add_entry_status(payload.serial_number, payload.product, payload.packaged)
    autosync()
    return es


@app.delete("/entry-status/{entry_id}", status_code=204)
def delete_entry_status(entry_id: int, store: Store = Depends(get_store), autosync=Depends(get_autosync)):
    store.delete_entry_status(entry_id)
    autosync()
    return Response(status_code=204)


# ---------- Reports ----------
@app.get("/stats/delivery", response_model=DeliveryStats)
def get_delivery_stats(store: Store = Depends(get_store)):
    return delivery_stats(store.list_orders())


# ---------- External sync ----------
@app.post("/sync/external")
def sync_external(
    store: Store = Depends(get_store),
    gateway: SyncGateway = Depends(get_gateway),
    fallback: LocalFallback = Depends(get_fallback),
):
    if not gateway.configured:
        raise ValidationError("Google Sheets URL not configured. Please set the SHEETS_URL environment variable.")
    result = push_snapshot(gateway, fallback, build_snapshot(store))
    return {"message": "Data synced to Google Sheets successfully", "result": result}


@app.get("/sync/status", response_model=SyncStatus)
def sync_status(gateway: SyncGateway = Depends(get_gateway)):
    return SyncStatus(
        configured=gateway.configured,
        url="Configured" if gateway.configured else "Not configured",
        last_checked=utcnow(),
        last_sync=gateway.last_sync,
    )


@app.get("/sync/fallback")
def sync_fallback(fallback: LocalFallback = Depends(get_fallback)):
    return fallback.load()
