"""
FX Trader – API Routes (FastAPI)
===================================
Endpoints REST y WebSocket para el frontend.

Endpoints disponibles:
  WS   /ws/market                                  → market_update + position_closed
  GET  /api/health                                 → health check
  GET  /api/status                                 → estado del simulador
  POST /api/accounts                               → crear cuenta
  GET  /api/accounts/{owner_id}                    → perfil y balance
  POST /api/positions/open                         → abrir posición
  POST /api/positions/close                        → cierre manual
  GET  /api/positions/active?owner_id=             → posiciones abiertas
  GET  /api/positions/history?owner_id=            → últimas cerradas
  POST /api/wallet/deposit                         → depósito (pending)
  POST /api/wallet/withdraw                        → retiro (debita + pending)
  GET  /api/wallet/transactions?owner_id=          → movimientos de la cuenta
  GET  /api/admin/accounts                         → todas las cuentas
  GET  /api/admin/transactions                     → transacciones pendientes
  POST /api/admin/transactions/approve             → aprobar transacción
  GET  /api/market/prices                          → precios actuales
  GET  /api/market/candles                         → todas las series
  GET  /api/market/candles/{instrument}/{timeframe}→ una serie

Los errores de dominio se traducen a JSON con domain_error_handler.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from backend.application.dto.position_dto import ClosePositionCommand, OpenPositionCommand
from backend.application.dto.wallet_dto import WalletRequestCommand
from backend.domain.exceptions.domain_errors import DomainError
from backend.presentation.api.schemas import (
    ApproveTransactionRequest,
    ClosePositionRequest,
    CreateAccountRequest,
    OpenPositionRequest,
    WalletRequest,
)
from backend.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Container inyectado desde main.py
_container = None


def init_routes(container) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _container
    _container = container


def _ready():
    if _container is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    return _container


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """DomainError → {"error": code, "message": ...} con su status HTTP."""
    if exc.status_code >= 500:
        logger.error("%s %s → %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rechazado: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ─── WebSocket endpoint para streaming a frontend ─────────────────────

@router.websocket("/ws/market")
async def market_stream(websocket: WebSocket) -> None:
    """
    El frontend se conecta aquí para recibir precios y velas cada tick.
    El broadcast lo maneja WebSocketManager; este handler solo gestiona
    el ciclo de vida de la conexión.
    """
    if _container is None:
        await websocket.close(code=1011, reason="Server not ready")
        return

    ws_manager = _container.ws_manager
    await ws_manager.connect(websocket)
    try:
        while True:
            try:
                data = await websocket.receive_text()
                logger.debug("Mensaje de cliente WS: %s", data[:100])
            except WebSocketDisconnect:
                break
    finally:
        ws_manager.disconnect(websocket)


# ─── Estado ────────────────────────────────────────────────────────────

@router.get("/api/health")
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {"status": "ok", "service": "fxtrader"}


@router.get("/api/status")
async def system_status() -> dict:
    c = _ready()
    return {
        "market_state": c.market_state.snapshot(),
        "tick_loop": c.tick_loop.stats,
        "ws": c.ws_manager.stats,
    }


# ─── Cuentas ───────────────────────────────────────────────────────────

@router.post("/api/accounts")
async def create_account(body: CreateAccountRequest) -> dict:
    account = await _ready().accounts.create_account(
        body.email, role=body.role, balance=body.balance,
    )
    return {"success": True, "account": account.to_dict()}


@router.get("/api/accounts/{owner_id}")
async def get_account(owner_id: int) -> dict:
    account = await _ready().accounts.get_account(owner_id)
    return account.to_dict()


# ─── Posiciones ────────────────────────────────────────────────────────

@router.post("/api/positions/open")
async def open_position(body: OpenPositionRequest) -> dict:
    position = await _ready().trading.open_position(OpenPositionCommand(
        owner_id=body.user_id,
        instrument=body.asset,
        size=body.size,
        side=body.type,
        entry_price=body.entry_price,
        take_profit=body.take_profit,
        stop_loss=body.stop_loss,
    ))
    return {"success": True, "id": position.id}


@router.post("/api/positions/close")
async def close_position(body: ClosePositionRequest) -> dict:
    result = await _ready().trading.close_position(ClosePositionCommand(
        owner_id=body.user_id,
        position_id=body.position_id,
        close_price=body.close_price,
    ))
    return result.to_dict()


@router.get("/api/positions/active")
async def active_positions(owner_id: int = Query(...)) -> list:
    positions = await _ready().trading.list_open(owner_id)
    return [p.to_dict() for p in positions]


@router.get("/api/positions/history")
async def position_history(owner_id: int = Query(...)) -> list:
    positions = await _ready().trading.history(owner_id)
    return [p.to_dict() for p in positions]


# ─── Billetera ─────────────────────────────────────────────────────────

@router.post("/api/wallet/deposit")
async def request_deposit(body: WalletRequest) -> dict:
    tx = await _ready().wallet.request_deposit(WalletRequestCommand(
        owner_id=body.user_id, amount=body.amount,
        method=body.method, reference=body.reference,
    ))
    return {"success": True, "transaction": tx.to_dict()}


@router.post("/api/wallet/withdraw")
async def request_withdrawal(body: WalletRequest) -> dict:
    tx = await _ready().wallet.request_withdrawal(WalletRequestCommand(
        owner_id=body.user_id, amount=body.amount,
        method=body.method, reference=body.reference,
    ))
    return {"success": True, "transaction": tx.to_dict()}


@router.get("/api/wallet/transactions")
async def wallet_transactions(owner_id: int = Query(...)) -> list:
    txs = await _ready().wallet.list_transactions(owner_id)
    return [t.to_dict() for t in txs]


# ─── Administración ────────────────────────────────────────────────────

@router.get("/api/admin/accounts")
async def admin_accounts() -> list:
    accounts = await _ready().accounts.list_accounts()
    return [a.to_dict() for a in accounts]


@router.get("/api/admin/transactions")
async def admin_pending_transactions() -> list:
    txs = await _ready().wallet.list_pending()
    return [t.to_dict() for t in txs]


@router.post("/api/admin/transactions/approve")
async def admin_approve_transaction(body: ApproveTransactionRequest) -> dict:
    tx = await _ready().wallet.approve_transaction(body.transaction_id)
    return {"success": True, "transaction": tx.to_dict()}


# ─── Mercado ───────────────────────────────────────────────────────────

@router.get("/api/market/prices")
async def market_prices() -> dict:
    return _ready().market_state.prices()


@router.get("/api/market/candles")
async def market_candles() -> dict:
    return _ready().market_state.candles_snapshot()


@router.get("/api/market/candles/{instrument:path}/{timeframe}")
async def market_series(instrument: str, timeframe: str, count: int = 200) -> dict:
    """Últimas N velas de un (instrumento, timeframe). Acepta "EUR/USD"."""
    state = _ready().market_state
    count = max(1, min(count, state.max_candles))
    candles = state.get_candles(instrument, timeframe, count)
    return {
        "asset": instrument,
        "timeframe": timeframe,
        "count": len(candles),
        "candles": [c.to_dict() for c in candles],
    }
