"""Messages — centralized user-facing (Polish) text for errors and API responses.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every investment status has a display label
    - Error classes carry these strings; nothing downstream parses them

Design Decisions:
    - One module for all copy: wording changes never touch service logic
    - Templates use str.format placeholders so callers stay declarative
"""

from app.core.domain_types import InvestmentStatus


# --- Offers -------------------------------------------------------------------

OFFER_NOT_FOUND = "Nie znaleziono oferty o podanym ID"
OFFER_NOT_AVAILABLE = "Ta oferta nie jest dostępna do inwestycji"
OFFER_EXPIRED = "Oferta jest już nieaktywna"
OFFER_CREATED = "Oferta została utworzona pomyślnie"
OFFER_UPDATED = "Oferta została zaktualizowana pomyślnie"
OFFER_CREATE_FAILED = "Błąd podczas tworzenia oferty"
OFFER_UPDATE_FAILED = "Błąd podczas aktualizacji oferty"
OFFER_IMAGES_SAVE_FAILED = "Nie udało się zapisać zdjęć oferty"
OFFER_MINIMUM_ABOVE_TARGET = (
    "Minimalna inwestycja nie może być większa niż docelowa kwota"
)
OFFER_END_IN_PAST = "Data nie może być z przeszłości"
OFFER_MUTATION_FORBIDDEN = "Nie masz uprawnień do edycji ofert"


# --- Investments --------------------------------------------------------------

INVESTMENT_NOT_FOUND = "Inwestycja o podanym ID nie istnieje"
INVESTMENT_MINIMUM_AMOUNT = "Kwota inwestycji musi wynosić co najmniej {minimum}"
INVESTMENT_CREATED = "Inwestycja została utworzona pomyślnie"
INVESTMENT_CREATE_FAILED = "Nie udało się utworzyć inwestycji"
INVESTMENT_UPDATE_FAILED = "Nie udało się zaktualizować inwestycji"
INVESTMENT_VIEW_FORBIDDEN = (
    "Brak dostępu - nie masz uprawnień do przeglądania tej inwestycji"
)
INVESTMENT_CANCEL_NOT_OWNER = (
    "Brak dostępu - możesz anulować tylko własne inwestycje"
)
INVESTMENT_CANCEL_WRONG_STATUS = (
    "Nie można anulować inwestycji ze statusem '{status}'. "
    "Tylko inwestycje oczekujące mogą być anulowane."
)
INVESTMENT_INVALID_TRANSITION = (
    "Nieprawidłowe przejście statusu: nie można zmienić statusu z "
    "'{current}' na '{requested}'"
)
INVESTMENT_REASON_REQUIRED = "Powód odrzucenia jest wymagany"
INVESTMENT_MANAGE_FORBIDDEN = "Nie masz uprawnień do zarządzania inwestycjami"


# --- Investment files ---------------------------------------------------------

FILE_NOT_FOUND = "Nie znaleziono pliku"
FILE_REQUIRES_ACCEPTED = "Pliki można dodawać tylko do zaakceptowanych inwestycji"
FILE_NAME_REQUIRED = "Nazwa pliku jest wymagana"
FILE_NAME_TOO_LONG = "Nazwa pliku jest zbyt długa"
FILE_EMPTY = "Wielkość pliku musi być większa od 0"
FILE_TOO_LARGE = "Wielkość pliku nie może przekraczać {limit_mb} MB"
FILE_TYPE_UNSUPPORTED = "Nieobsługiwany typ pliku"
FILE_ACCESS_FORBIDDEN = "Brak dostępu do plików tej inwestycji"
FILE_MANAGE_FORBIDDEN = "Tylko administrator może dodawać i usuwać pliki"
FILE_UPLOADED = "Plik został dodany"
FILE_DELETED = "Plik został usunięty"
FILE_STORAGE_FAILED = "Nie udało się zapisać pliku"


# --- Auth & users -------------------------------------------------------------

AUTH_REQUIRED = "Musisz być zalogowany, aby uzyskać dostęp do tego zasobu"
AUTH_INVALID_TOKEN = "Sesja wygasła lub jest nieprawidłowa"
AUTH_INVALID_CREDENTIALS = "Nieprawidłowy e-mail lub hasło"
AUTH_EMAIL_TAKEN = "Użytkownik o tym adresie e-mail już istnieje"
AUTH_WRONG_CURRENT_PASSWORD = "Aktualne hasło jest nieprawidłowe"
AUTH_LOGIN_OK = "Logowanie zakończone pomyślnie"
AUTH_REGISTER_OK = "Rejestracja zakończona pomyślnie"
AUTH_LOGOUT_OK = "Wylogowano pomyślnie"
AUTH_PASSWORD_CHANGED = "Hasło zostało zmienione"
ADMIN_REQUIRED = "Nie masz uprawnień do dostępu do tego zasobu"
USER_NOT_FOUND = "Nie znaleziono użytkownika"

PASSWORD_UPPERCASE = "Hasło musi zawierać co najmniej jedną wielką literę"
PASSWORD_DIGIT = "Hasło musi zawierać co najmniej jedną cyfrę"
PASSWORD_SPECIAL = "Hasło musi zawierać co najmniej jeden znak specjalny"
PASSWORDS_MISMATCH = "Hasła muszą być identyczne"
PASSWORD_UNCHANGED = "Nowe hasło musi być różne od aktualnego hasła"
NAME_LETTERS_ONLY = "Pole może zawierać tylko litery"
EMAIL_TOO_LONG = "Adres e-mail może mieć maksymalnie 100 znaków"
SORT_FORMAT = "Sortowanie musi być w formacie 'field:order' (np. 'created_at:desc')"


# --- Generic ------------------------------------------------------------------

VALIDATION_FAILED = "Podane dane są nieprawidłowe"
UNEXPECTED_ERROR = "Wystąpił nieoczekiwany błąd serwera"
DATABASE_FAILURE = "Błąd bazy danych"


# --- Status labels ------------------------------------------------------------

_INVESTMENT_STATUS_LABELS: dict[InvestmentStatus, str] = {
    InvestmentStatus.PENDING: "W oczekiwaniu",
    InvestmentStatus.ACCEPTED: "Zaakceptowana",
    InvestmentStatus.REJECTED: "Odrzucona",
    InvestmentStatus.CANCELLED: "Anulowana",
    InvestmentStatus.COMPLETED: "Zakończona",
}


def investment_status_label(status: str) -> str:
    """Display label for an investment status; unknown values echo back."""
    try:
        return _INVESTMENT_STATUS_LABELS[InvestmentStatus(status)]
    except ValueError:
        return status
