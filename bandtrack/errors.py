from fastapi import HTTPException


class NotFoundError(HTTPException):
    """Odkazovaná entita (vybavení, výpůjčka, uživatel, akce) neexistuje."""

    def __init__(self, detail: str):
        super().__init__(status_code=404, detail=detail)


class InvalidStateError(HTTPException):
    """Entita existuje, ale její stav požadovaný přechod nepovoluje."""

    def __init__(self, detail: str):
        super().__init__(status_code=409, detail=detail)
