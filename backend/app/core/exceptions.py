"""
Eccezioni Custom per l'applicazione.
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Definisce eccezioni specifiche del dominio per una gestione
centralizzata degli errori. Ogni eccezione porta con sé lo status HTTP
e un codice stabile che il frontend usa per distinguere i casi.

NOTA: BusinessValidationError è distinta da pydantic.ValidationError.
- pydantic.ValidationError: errori di formato/tipo nei dati di input (FastAPI → 422)
- BusinessValidationError: violazioni delle regole di dominio (nostro handler → 422)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "DuplicateError",
    "BusinessValidationError",
    "ValidationError",       # alias di BusinessValidationError
    "InvalidStateError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
]


class AppException(Exception):
    """
    Base exception per l'applicazione.

    Attributes:
        status_code: HTTP status code da restituire al client
        error_code: Identificativo univoco dell'errore per il frontend
        detail: Messaggio di errore leggibile per l'utente
        extra: Dizionario con dati aggiuntivi per il frontend
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    default_detail: str = "Errore interno del server"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Inizializza l'eccezione.

        Args:
            detail: Messaggio di errore dettagliato (default: quello di classe)
            error_code: Identificativo univoco (default: quello di classe)
            extra: Dati aggiuntivi da passare al frontend (default: None)
        """
        self.detail = detail if detail is not None else self.default_detail
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Corpo JSON della risposta di errore."""
        body: Dict[str, Any] = {"message": self.detail, "code": self.error_code}
        if self.extra:
            body.update(self.extra)
        return body


class NotFoundError(AppException):
    """
    Eccezione sollevata quando una risorsa non viene trovata.

    Utilizzata quando un'entità cercata non esiste nel database.
    """

    status_code: int = 404
    error_code: str = "NOT_FOUND"
    default_detail: str = "Risorsa non trovata"


class DuplicateError(AppException):
    """
    Eccezione sollevata quando si tenta di creare una risorsa duplicata.

    Utilizzata per violazioni di vincoli unique (es. email utente già registrata).
    """

    status_code: int = 409
    error_code: str = "DUPLICATE_RESOURCE"
    default_detail: str = "Risorsa già esistente"


class BusinessValidationError(ValueError, AppException):
    """
    Eccezione sollevata per violazioni delle regole di business logic.

    Eredita da ValueError per essere catturata dai validatori Pydantic.

    Esempi di utilizzo:
        - "Il preventivo deve contenere almeno una riga"
        - "Lo sconto non può superare il subtotale"
        - "L'importo supera il residuo da pagare"
    """

    status_code: int = 422
    error_code: str = "VALIDATION_ERROR"
    default_detail: str = "Validazione dati fallita"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Chiama AppException.__init__ direttamente per evitare ValueError
        AppException.__init__(self, detail, error_code, extra)


# Alias per compatibilità
ValidationError = BusinessValidationError


class InvalidStateError(AppException):
    """
    Eccezione sollevata quando un'operazione non è consentita
    dallo stato corrente del documento.

    Esempi di utilizzo:
        - "Il preventivo è già stato convertito in fattura"
        - "La fattura risulta già saldata"
        - "L'appuntamento è già stato completato"
    """

    status_code: int = 409
    error_code: str = "INVALID_STATE"
    default_detail: str = "Operazione non consentita nello stato corrente"


class ConflictError(AppException):
    """
    Eccezione sollevata per conflitti di persistenza.

    Utilizzata quando una scrittura concorrente viola un vincolo
    del database (es. numero documento duplicato). Il client può ritentare.
    """

    status_code: int = 409
    error_code: str = "CONFLICT"
    default_detail: str = "Conflitto durante il salvataggio, riprovare"


class AuthenticationError(AppException):
    """
    Eccezione sollevata quando la richiesta non è autenticata.

    Token mancante, scaduto, malformato o utente disattivato.
    """

    status_code: int = 401
    error_code: str = "UNAUTHENTICATED"
    default_detail: str = "Autenticazione richiesta"


class AuthorizationError(AppException):
    """
    Eccezione sollevata per accesso non autorizzato.

    Esempi di utilizzo:
        - "Solo gli amministratori possono registrare nuovi utenti"
    """

    status_code: int = 403
    error_code: str = "FORBIDDEN"
    default_detail: str = "Accesso non autorizzato"
