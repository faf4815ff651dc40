"""
Localized (pt-BR) user-facing messages.

Every resource family has a label with its singular and plural names and the
grammatical gender suffix ("o" or "a") used to inflect the templates below.

Usage:
    from admin_service.domain import messages

    messages.not_found("church")        # "A igreja não foi encontrada."
    messages.for_handler("church", "restore")
"""

from typing import NamedTuple


class ResourceLabel(NamedTuple):
    singular: str
    plural: str
    gender: str


LABELS: dict[str, ResourceLabel] = {
    "field": ResourceLabel("Campo", "Campos", "o"),
    "church": ResourceLabel("Igreja", "Igrejas", "a"),
    "volunteer": ResourceLabel("Voluntário", "Voluntários", "o"),
    "announcement": ResourceLabel("Anúncio", "Anúncios", "o"),
    "agenda": ResourceLabel("Evento", "Eventos", "o"),
    "testimonial": ResourceLabel("Testemunho", "Testemunhos", "o"),
    "file": ResourceLabel("Arquivo", "Arquivos", "o"),
    "log": ResourceLabel("Log", "Logs", "o"),
}

_FALLBACK = ResourceLabel("Recurso", "Recursos", "o")


def label(resource: str) -> ResourceLabel:
    return LABELS.get(resource, _FALLBACK)


# Route templates
def create(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.singular} criad{lbl.gender} com sucesso!"


def find_one(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.singular} recuperad{lbl.gender} com sucesso!"


def find_all(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.plural} recuperad{lbl.gender}s com sucesso!"


def update(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.singular} atualizad{lbl.gender} com sucesso!"


def remove(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.singular} removid{lbl.gender} com sucesso!"


def restore(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.plural} restaurad{lbl.gender}s com sucesso!"


def hard_remove(resource: str) -> str:
    lbl = label(resource)
    return f"{lbl.plural} removid{lbl.gender}s permanentemente com sucesso!"


_HANDLER_TEMPLATES = {
    "create": create,
    "find_one": find_one,
    "find_all": find_all,
    "update": update,
    "remove": remove,
    "restore": restore,
    "hard_remove": hard_remove,
}


def for_handler(resource: str, handler: str) -> str:
    """Success message for a generic resource handler."""
    return _HANDLER_TEMPLATES[handler](resource)


# Exception templates
def not_found(resource: str) -> str:
    lbl = label(resource)
    name = lbl.singular.lower()
    return f"{lbl.gender.upper()} {name} não foi encontrad{lbl.gender}."


def conflict(resource: str) -> str:
    lbl = label(resource)
    name = lbl.singular.lower()
    return f"{lbl.gender.upper()} {name} já está sendo utilizad{lbl.gender}."


def invalid(resource: str) -> str:
    lbl = label(resource)
    name = lbl.singular.lower()
    return f"{lbl.gender.upper()} {name} possui dados inválidos."
