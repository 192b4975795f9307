from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


class StatoRecord(enum.Enum):
    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class PersonaMixin:
    """Anagrafica comune a medici, segretari e pazienti."""

    nome: Mapped[str] = mapped_column(String(80), nullable=False)
    cognome: Mapped[str] = mapped_column(String(80), nullable=False)
    telefono: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(120), nullable=True, unique=True)


class Medico(PersonaMixin, Base):
    __tablename__ = "medici"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_status: Mapped[StatoRecord] = mapped_column(
        Enum(StatoRecord), default=StatoRecord.ACTIVE, nullable=False
    )

    segretari: Mapped[list["Segretario"]] = relationship(back_populates="medico")
    pazienti: Mapped[list["Paziente"]] = relationship(back_populates="medico")
    prenotazioni: Mapped[list["Prenotazione"]] = relationship(back_populates="medico")

    def __repr__(self) -> str:
        return f"Medico({self.nome} {self.cognome}, {self.record_status.value})"


class Segretario(PersonaMixin, Base):
    __tablename__ = "segretari"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_status: Mapped[StatoRecord] = mapped_column(
        Enum(StatoRecord), default=StatoRecord.ACTIVE, nullable=False
    )
    medico_id: Mapped[int | None] = mapped_column(ForeignKey("medici.id"), nullable=True)

    medico: Mapped["Medico | None"] = relationship(back_populates="segretari")

    def __repr__(self) -> str:
        return f"Segretario({self.nome} {self.cognome}, {self.record_status.value})"


class Paziente(PersonaMixin, Base):
    __tablename__ = "pazienti"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_status: Mapped[StatoRecord] = mapped_column(
        Enum(StatoRecord), default=StatoRecord.ACTIVE, nullable=False
    )
    codice_fiscale: Mapped[str | None] = mapped_column(String(16), nullable=True, unique=True)
    medico_id: Mapped[int | None] = mapped_column(ForeignKey("medici.id"), nullable=True)

    medico: Mapped["Medico | None"] = relationship(back_populates="pazienti")
    prenotazioni: Mapped[list["Prenotazione"]] = relationship(back_populates="paziente")

    def __repr__(self) -> str:
        return f"Paziente({self.nome} {self.cognome}, {self.record_status.value})"


class Prenotazione(Base):
    __tablename__ = "prenotazioni"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    record_status: Mapped[StatoRecord] = mapped_column(
        Enum(StatoRecord), default=StatoRecord.ACTIVE, nullable=False
    )
    data_prenotazione: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    medico_id: Mapped[int] = mapped_column(ForeignKey("medici.id"), nullable=False)
    paziente_id: Mapped[int] = mapped_column(ForeignKey("pazienti.id"), nullable=False)

    medico: Mapped["Medico"] = relationship(back_populates="prenotazioni")
    paziente: Mapped["Paziente"] = relationship(back_populates="prenotazioni")

    def __repr__(self) -> str:
        return f"Prenotazione({self.data_prenotazione:%d/%m/%Y %H:%M}, {self.record_status.value})"
