"""
Excepciones de la API y del motor de vacunación.

Las HTTP se propagan tal cual hasta FastAPI. Las de dominio no dependen
de HTTP: UnknownAgeGroupError es un error de programación/configuración
y debe fallar ruidosamente; MalformedRecordError se recupera localmente.
"""

from fastapi import HTTPException, status


class NotFoundException(HTTPException):
    """Recurso no encontrado (404)."""

    def __init__(self, resource: str = "Recurso", detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{resource} no encontrado",
        )


# ── Errores de dominio ───────────────────────────────


class UnknownAgeGroupError(ValueError):
    """Grupo de edad sin regla de desplazamiento en el calendario."""

    def __init__(self, age_group: str):
        self.age_group = age_group
        super().__init__(f"Grupo de edad desconocido: {age_group!r}")


class MalformedRecordError(ValueError):
    """Registro de vacuna sin fecha de vencimiento o con fecha ilegible."""

    def __init__(self, record_id, reason: str):
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"Registro de vacuna {record_id} malformado: {reason}")
