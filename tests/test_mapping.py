from datetime import datetime, timezone
from decimal import Decimal

import pytest

from tobaco_api import mapping, models
from tobaco_api.schemas import (
    CategoriaDTO,
    ClienteDTO,
    PedidoBorrador,
    PedidoDTO,
    PedidoProductoDTO,
    ProductoDTO,
    ProductoIn,
)


def test_pedido_a_dto_copia_el_total_sin_recalcular():
    fecha = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    pedido = models.Pedido(
        Id=4,
        ClienteId=7,
        Total=Decimal("1.00"),
        Fecha=fecha,
        MetodoPago=models.MetodoPago.CuentaCorriente,
        PedidoProductos=[models.PedidoProducto(PedidoId=4, ProductoId=3, Cantidad=Decimal("5"))],
    )
    dto = mapping.pedido_a_dto(pedido)
    assert dto.Total == Decimal("1.00")
    assert dto.Fecha == fecha
    assert dto.PedidoProductos == [PedidoProductoDTO(ProductoId=3, Cantidad=Decimal("5"))]


def test_borrador_a_pedido():
    borrador = PedidoBorrador(
        ClienteId=7,
        PedidoProductos=[PedidoProductoDTO(ProductoId=3, Cantidad=Decimal("2"))],
    )
    pedido = mapping.borrador_a_pedido(borrador, id=9)
    assert pedido.Id == 9
    assert pedido.Total is None
    assert pedido.MetodoPago == models.MetodoPago.Efectivo
    assert [(l.PedidoId, l.ProductoId, l.Cantidad) for l in pedido.PedidoProductos] == [(9, 3, Decimal("2"))]


def test_dto_a_producto():
    producto = mapping.dto_a_producto(
        ProductoIn(Nombre="Habano", Precio=Decimal("35.00"), CategoriaId=2, Stock=Decimal("3")), id=11
    )
    assert (producto.Id, producto.Nombre, producto.Precio, producto.CategoriaId, producto.Stock) == (
        11, "Habano", Decimal("35.00"), 2, Decimal("3"),
    )


@pytest.mark.parametrize("modelo", [ClienteDTO, CategoriaDTO, ProductoDTO, PedidoProductoDTO, PedidoDTO])
def test_dtos_se_leen_desde_atributos(modelo):
    assert modelo.model_config["from_attributes"] is True
