"""
Schemas Pydantic condivisi
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Contiene:
- ApiModel: base con alias camelCase in uscita e input in entrambe le forme
- Money: Decimal serializzato come numero JSON
- DataResponse: involucro {"data": ...} di tutte le risposte
- ErrorResponse: corpo delle risposte di errore
"""

from decimal import Decimal
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ApiModel(BaseModel):
    """Base di tutti gli schemi esposti dall'API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(BaseModel, Generic[T]):
    """Risposta standard: entità o lista dentro la chiave `data`."""

    data: T


class ErrorResponse(BaseModel):
    """Corpo delle risposte di errore."""

    message: str = Field(..., description="Messaggio leggibile")
    code: str = Field(..., description="Codice stabile dell'errore")
    errors: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Dettaglio degli errori di validazione input",
    )


__all__ = [
    "ApiModel",
    "DataResponse",
    "ErrorResponse",
    "Money",
]
