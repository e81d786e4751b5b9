# tobaco_api/models.py
import enum
from datetime import timezone
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from .db import Base


class FechaUTC(TypeDecorator):
    """DateTime que siempre se guarda y se lee en UTC.

    SQLite no conserva el offset; al leer se vuelve a marcar como UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class MetodoPago(str, enum.Enum):
    Efectivo = "Efectivo"
    Transferencia = "Transferencia"
    Tarjeta = "Tarjeta"
    CuentaCorriente = "CuentaCorriente"


class Cliente(Base):
    __tablename__ = "Clientes"

    Id = Column(Integer, primary_key=True, index=True)
    Nombre = Column(String(255), nullable=False)
    Deuda = Column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))


class Categoria(Base):
    __tablename__ = "Categorias"
    __table_args__ = (CheckConstraint('length("Nombre") > 0', name="ck_categoria_nombre"),)

    Id = Column(Integer, primary_key=True, index=True)
    Nombre = Column(String(100), nullable=False, unique=True)


class Producto(Base):
    __tablename__ = "Productos"

    Id = Column(Integer, primary_key=True, index=True)
    Nombre = Column(String(255), nullable=False)
    Precio = Column(Numeric(18, 2), nullable=False)
    Stock = Column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    # RESTRICT: no se puede borrar una categoría con productos
    CategoriaId = Column(Integer, ForeignKey("Categorias.Id", ondelete="RESTRICT"), nullable=False)


class Pedido(Base):
    __tablename__ = "Pedidos"

    Id = Column(Integer, primary_key=True, index=True)
    ClienteId = Column(Integer, ForeignKey("Clientes.Id", ondelete="RESTRICT"), nullable=False)
    Total = Column(Numeric(18, 2), nullable=False, default=Decimal("0.00"))
    Fecha = Column(FechaUTC, nullable=False)
    MetodoPago = Column(Enum(MetodoPago), nullable=False, default=MetodoPago.Efectivo)

    # Única colección del modelo: las líneas pertenecen al pedido y no
    # guardan referencia de vuelta (ni al pedido ni al producto).
    PedidoProductos = relationship(
        "PedidoProducto",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PedidoProducto.ProductoId",
        lazy="selectin",
    )


class PedidoProducto(Base):
    __tablename__ = "PedidosProductos"
    __table_args__ = (CheckConstraint('"Cantidad" > 0', name="ck_pedido_producto_cantidad"),)

    PedidoId = Column(Integer, ForeignKey("Pedidos.Id", ondelete="CASCADE"), primary_key=True)
    ProductoId = Column(Integer, ForeignKey("Productos.Id", ondelete="RESTRICT"), primary_key=True)
    Cantidad = Column(Numeric(18, 2), nullable=False)
