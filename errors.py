"""
=============================================================================
ERRORS.PY — Errores clasificados de las acciones
=============================================================================
Toda acción que falla lanza un ActionError con un código estable
("NOT_FOUND", "FORBIDDEN"...). main.py lo convierte en:

  {"success": false, "error": {"code": "...", "message": "..."}}

con el status HTTP que corresponde al código.
"""

from fastapi import HTTPException, status

ERROR_STATUS = {
    "BAD_REQUEST": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "INTERNAL_SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ActionError(HTTPException):
    """HTTPException con código de error legible por la web"""

    def __init__(self, code: str, message: str):
        if code not in ERROR_STATUS:
            raise ValueError(f"Código de error desconocido: {code}")
        super().__init__(status_code=ERROR_STATUS[code], detail=message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": {"code": self.code, "message": self.message}}
