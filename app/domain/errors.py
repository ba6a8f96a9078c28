"""Excepciones de dominio para el pipeline de reservas y liquidación de depósitos."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de Reserva ===


class BookingNotFoundError(DomainError):
    """La reserva no existe."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"Reserva no encontrada: {booking_id}",
            code="BOOKING_NOT_FOUND",
        )
        self.booking_id = booking_id


class BookingAccessDeniedError(DomainError):
    """El usuario no es dueño de la reserva."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"Acceso denegado a la reserva {booking_id}",
            code="ACCESS_DENIED",
        )
        self.booking_id = booking_id


class InvalidWindowError(DomainError):
    """Ventana de renta inválida (fin <= inicio)."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_WINDOW")


class SlotUnavailableError(DomainError):
    """El remolque ya está reservado en un intervalo que se superpone."""

    def __init__(self, trailer_id: str, conflicting_booking_ids: list[str] | None = None):
        super().__init__(
            message=f"El remolque {trailer_id} no está disponible en el periodo solicitado",
            code="SLOT_UNAVAILABLE",
        )
        self.trailer_id = trailer_id
        self.conflicting_booking_ids = conflicting_booking_ids or []


class InvalidTransitionError(DomainError):
    """Transición de estado fuera de la máquina de estados."""

    def __init__(self, entity: str, entity_id: str | None, current_status: str, target_status: str):
        super().__init__(
            message=f"Transición inválida de {entity} {entity_id}: "
            f"'{current_status}' -> '{target_status}'",
            code="INVALID_TRANSITION",
        )
        self.entity = entity
        self.entity_id = entity_id
        self.current_status = current_status
        self.target_status = target_status


class OptimisticLockError(DomainError):
    """Conflicto de concurrencia al actualizar la reserva."""

    def __init__(self, booking_id: str, expected_version: int, actual_version: int | None):
        super().__init__(
            message=f"Conflicto de concurrencia en reserva {booking_id}: "
            f"versión esperada {expected_version}, versión actual {actual_version}",
            code="OPTIMISTIC_LOCK_ERROR",
        )
        self.booking_id = booking_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class TrailerNotFoundError(DomainError):
    """El remolque no existe en el catálogo."""

    def __init__(self, trailer_id: str):
        super().__init__(
            message=f"Remolque no encontrado: {trailer_id}",
            code="TRAILER_NOT_FOUND",
        )
        self.trailer_id = trailer_id


# === Errores de Pago ===


class PaymentNotFoundError(DomainError):
    """El pago no existe."""

    def __init__(self, payment_id: str):
        super().__init__(
            message=f"Pago no encontrado: {payment_id}",
            code="PAYMENT_NOT_FOUND",
        )
        self.payment_id = payment_id


class PaymentAlreadyCompletedError(DomainError):
    """Ya existe un pago completado de ese tipo para la reserva."""

    def __init__(self, booking_id: str, kind: str):
        super().__init__(
            message=f"La reserva {booking_id} ya tiene un pago {kind} completado",
            code="PAYMENT_ALREADY_COMPLETED",
        )
        self.booking_id = booking_id
        self.kind = kind


class PaymentRejectedError(DomainError):
    """La pasarela rechazó explícitamente el pago."""

    def __init__(self, booking_id: str, error_code: str | None = None, detail: str | None = None):
        super().__init__(
            message=f"La pasarela rechazó el pago de la reserva {booking_id}"
            + (f": {detail}" if detail else ""),
            code="PAYMENT_REJECTED",
        )
        self.booking_id = booking_id
        self.error_code = error_code


class GatewayUnavailableError(DomainError):
    """La pasarela no respondió; el resultado de la operación es desconocido."""

    def __init__(self, operation: str, detail: str | None = None):
        super().__init__(
            message=f"Pasarela de pago no disponible durante '{operation}'"
            + (f": {detail}" if detail else ""),
            code="GATEWAY_UNAVAILABLE",
        )
        self.operation = operation


class InvalidSignatureError(DomainError):
    """La firma del webhook no coincide."""

    def __init__(self):
        super().__init__(message="Firma de webhook inválida", code="INVALID_SIGNATURE")


class UnknownPaymentError(DomainError):
    """Webhook para un gateway_payment_id desconocido."""

    def __init__(self, gateway_payment_id: str | None):
        super().__init__(
            message=f"Pago desconocido en webhook: {gateway_payment_id}",
            code="UNKNOWN_PAYMENT",
        )
        self.gateway_payment_id = gateway_payment_id


# === Errores de Fotos y Depósito ===


class PhotoNotFoundError(DomainError):
    """La foto referenciada no existe en el almacenamiento."""

    def __init__(self, booking_id: str, phase: str, side: str):
        super().__init__(
            message=f"Foto no encontrada para reserva {booking_id}, fase {phase}, lado {side}",
            code="PHOTO_NOT_FOUND",
        )
        self.booking_id = booking_id
        self.phase = phase
        self.side = side


class PhotoPhaseClosedError(DomainError):
    """La reserva no acepta fotos para esa fase en su estado actual."""

    def __init__(self, booking_id: str, phase: str, booking_status: str):
        super().__init__(
            message=f"No se aceptan fotos {phase} para la reserva {booking_id} "
            f"en estado '{booking_status}'",
            code="PHOTO_PHASE_CLOSED",
        )
        self.booking_id = booking_id
        self.phase = phase
        self.booking_status = booking_status


class SettlementFailedError(DomainError):
    """La pasarela rechazó la captura o liberación del depósito."""

    def __init__(self, booking_id: str, detail: str | None = None):
        super().__init__(
            message=f"Falló la liquidación del depósito de la reserva {booking_id}"
            + (f": {detail}" if detail else ""),
            code="SETTLEMENT_FAILED",
        )
        self.booking_id = booking_id


class DepositRefundNotFoundError(DomainError):
    """No hay liquidación de depósito para la reserva."""

    def __init__(self, booking_id: str):
        super().__init__(
            message=f"No existe liquidación de depósito para la reserva {booking_id}",
            code="DEPOSIT_REFUND_NOT_FOUND",
        )
        self.booking_id = booking_id
