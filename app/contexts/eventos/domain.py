"""
Modelos de dominio do contexto de Eventos.
"""
import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class EventoData:
    """Linha da tabela events."""

    id: str
    organization_id: str
    event_id: str  # slug publico
    name: str
    message_text: str = ""
    status: str = "draft"
    event_date: Optional[str] = None
    location: Optional[str] = None
    message_image: Optional[str] = None
    image_filename: Optional[str] = None
    instance_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: dict) -> "EventoData":
        """Cria a partir de linha do banco."""
        return cls(
            id=row["id"],
            organization_id=row.get("organization_id", ""),
            event_id=row.get("event_id", ""),
            name=row.get("name", ""),
            message_text=row.get("message_text") or "",
            status=row.get("status") or "draft",
            event_date=row.get("event_date"),
            location=row.get("location"),
            message_image=row.get("message_image"),
            image_filename=row.get("image_filename"),
            instance_id=row.get("instance_id"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "event_id": self.event_id,
            "name": self.name,
            "message_text": self.message_text,
            "status": self.status,
            "event_date": self.event_date,
            "location": self.location,
            "message_image": self.message_image,
            "image_filename": self.image_filename,
            "instance_id": self.instance_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def slugify(texto: str) -> str:
    """
    Gera slug para URL a partir de um nome.

    Ex: "Encontro São João 2025" -> "encontro-sao-joao-2025"
    """
    texto = unicodedata.normalize("NFKD", str(texto).lower().strip())
    texto = "".join(c for c in texto if not unicodedata.combining(c))
    texto = re.sub(r"[^a-z0-9]+", "-", texto)
    return texto.strip("-")


def gerar_slug_unico(texto: str, existentes: Iterable[str]) -> str:
    """Acrescenta -1, -2... ate o slug nao colidir com os existentes."""
    existentes = set(existentes)
    base = slugify(texto) or "evento"
    slug = base
    contador = 1
    while slug in existentes:
        slug = f"{base}-{contador}"
        contador += 1
    return slug
