# tobaco_api/schemas.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from . import models


# ----- Clientes -----
class ClienteIn(BaseModel):
    Nombre: str = Field(min_length=1, max_length=255)
    Deuda: Decimal = Field(default=Decimal("0.00"), decimal_places=2)


class ClienteDTO(ClienteIn):
    Id: int

    model_config = ConfigDict(from_attributes=True)


# ----- Categorías -----
class CategoriaIn(BaseModel):
    Nombre: str


class CategoriaDTO(CategoriaIn):
    Id: int

    model_config = ConfigDict(from_attributes=True)


# ----- Productos -----
class ProductoIn(BaseModel):
    Nombre: str = Field(min_length=1, max_length=255)
    Precio: Decimal = Field(ge=0, decimal_places=2)
    CategoriaId: int
    Stock: Decimal = Field(default=Decimal("0.00"), decimal_places=2)


class ProductoDTO(ProductoIn):
    Id: int

    model_config = ConfigDict(from_attributes=True)


# ----- Pedidos -----
class PedidoProductoDTO(BaseModel):
    ProductoId: int
    Cantidad: Decimal = Field(decimal_places=2)

    model_config = ConfigDict(from_attributes=True)


class PedidoBorrador(BaseModel):
    """Estado deseado de un pedido. ``Total`` y ``Fecha`` se ignoran al escribir."""

    ClienteId: int
    MetodoPago: models.MetodoPago = models.MetodoPago.Efectivo
    PedidoProductos: list[PedidoProductoDTO] = []
    Total: Decimal | None = None
    Fecha: datetime | None = None


class PedidoDTO(BaseModel):
    Id: int
    ClienteId: int
    Total: Decimal
    Fecha: datetime
    MetodoPago: models.MetodoPago
    PedidoProductos: list[PedidoProductoDTO]

    model_config = ConfigDict(from_attributes=True)
