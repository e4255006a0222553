"""
FX Trader – Domain Exceptions
===============================
Excepciones específicas del dominio de negocio.

Estas excepciones capturan rechazos de negocio que se reportan al
caller como respuesta estructurada, NO errores técnicos.

JERARQUÍA:
    DomainError (base)
    ├── ValidationError
    ├── UnknownInstrumentError
    ├── InsufficientMarginError
    ├── InsufficientBalanceError
    ├── AccountNotFoundError
    ├── DuplicateAccountError
    ├── PositionNotFoundError
    ├── PositionAlreadyClosedError
    ├── InvalidTransactionError
    └── SettlementError
"""

from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    status_code: int = 400

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainError):
    """Error de validación general de datos de dominio."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        self.value = value


class UnknownInstrumentError(DomainError):
    """El instrumento no pertenece al catálogo simulado."""

    def __init__(self, instrument: str):
        super().__init__(f"Instrumento desconocido: {instrument}", code="UNKNOWN_INSTRUMENT")
        self.instrument = instrument


class InsufficientMarginError(DomainError):
    """El balance no cubre el margen requerido para abrir la posición."""

    def __init__(self, required: float, available: float):
        super().__init__(
            f"Margen insuficiente: requerido={required:.2f} disponible={available:.2f}",
            code="INSUFFICIENT_MARGIN",
        )
        self.required = required
        self.available = available


class InsufficientBalanceError(DomainError):
    """El balance no cubre el monto solicitado."""

    def __init__(self, requested: float, available: float):
        super().__init__(
            f"Balance insuficiente: solicitado={requested:.2f} disponible={available:.2f}",
            code="INSUFFICIENT_BALANCE",
        )
        self.requested = requested
        self.available = available


class AccountNotFoundError(DomainError):
    status_code = 404

    def __init__(self, account_id: int):
        super().__init__(f"Cuenta no encontrada: {account_id}", code="ACCOUNT_NOT_FOUND")
        self.account_id = account_id


class DuplicateAccountError(DomainError):
    def __init__(self, email: str):
        super().__init__(f"La cuenta ya existe: {email}", code="DUPLICATE_ACCOUNT")
        self.email = email


class PositionNotFoundError(DomainError):
    """La posición no existe o no pertenece a la cuenta."""

    status_code = 404

    def __init__(self, position_id: int):
        super().__init__(f"Posición no encontrada: {position_id}", code="POSITION_NOT_FOUND")
        self.position_id = position_id


class PositionAlreadyClosedError(DomainError):
    def __init__(self, message: str, position_id: Optional[int] = None):
        super().__init__(message, code="POSITION_CLOSED")
        self.position_id = position_id


class InvalidTransactionError(DomainError):
    """La transacción no existe o ya no está pendiente."""

    def __init__(self, message: str, transaction_id: Optional[int] = None):
        super().__init__(message, code="INVALID_TRANSACTION")
        self.transaction_id = transaction_id


class SettlementError(DomainError):
    """Fallo técnico durante la liquidación; la unidad hizo rollback."""

    status_code = 500

    def __init__(self, message: str, position_id: Optional[int] = None):
        super().__init__(message, code="SETTLEMENT_FAILED")
        self.position_id = position_id
