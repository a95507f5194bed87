"""
Exceptions métier levées par les services.
Chacune porte le code HTTP vers lequel main.py la traduit.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidDataError(ServiceError, ValueError):
    """Données cohérentes syntaxiquement mais refusées par une règle métier."""
    status_code = 400


class ForbiddenError(ServiceError):
    """L'utilisateur est authentifié mais n'a pas accès à la ressource."""
    status_code = 403


class NotFoundError(ServiceError, LookupError):
    status_code = 404


class ConflictError(ServiceError, ValueError):
    """Doublon ou violation d'unicité."""
    status_code = 409
