"""
Application-layer exceptions.

These exceptions are used across application and infrastructure layers.
Each carries a user-facing (Swedish) message alongside the technical one so
the API layer can surface something readable together with a retry hint.
"""
from typing import Optional


class HeavyGymError(Exception):
    """Base class for all domain errors raised by the service."""

    user_message = "Ett fel uppstod. Försök igen."
    retryable = False

    def __init__(self, message: str, *, user_message: Optional[str] = None):
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message


class GatewayError(HeavyGymError):
    """The hosted database rejected a request or could not be reached.

    Attributes:
        code: Backend error code when one was reported (e.g. a Postgres SQLSTATE)
    """

    user_message = "Kunde inte ansluta till servern. Kontrollera din internetanslutning och försök igen."
    retryable = True

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message, user_message=user_message)
        self.code = code


class RecordNotFoundError(HeavyGymError):
    """A user-owned row does not exist or belongs to another user."""

    user_message = "Hittades inte."


class EmptyDraftError(HeavyGymError):
    """A workout draft without exercises was submitted."""

    user_message = "Du måste lägga till minst en övning"


class InvalidSetValueError(HeavyGymError):
    """A draft set holds weight or reps text that is not a number."""

    user_message = "Vikt och repetitioner måste vara siffror"


class InvalidMacroInputError(HeavyGymError, ValueError):
    """Body metrics or enum labels passed to the macro calculator are invalid."""

    user_message = "Vänligen fyll i alla obligatoriska fält"


class InvalidWeightError(HeavyGymError, ValueError):
    """A body weight entry is not a plausible weight in kg."""

    user_message = "Ange en giltig vikt"


class FoodDatabaseError(HeavyGymError):
    """Open Food Facts answered with a non-OK status.

    Attributes:
        status_code: HTTP status returned upstream
    """

    user_message = "Ett fel uppstod vid sökning. Försök igen om en stund."
    retryable = True

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class FoodDatabaseUnavailable(HeavyGymError):
    """Open Food Facts could not be reached."""

    user_message = "Kunde inte ansluta till servern. Kontrollera din internetanslutning och försök igen."
    retryable = True


class FoodDatabaseTimeout(FoodDatabaseUnavailable):
    """Open Food Facts did not answer within the configured timeout."""

    user_message = "Sökningen tog för lång tid. Försök igen eller använd en mer specifik sökterm."


class ProductNotFoundError(HeavyGymError):
    """No product matched a barcode lookup."""

    user_message = "Produkten hittades inte."
