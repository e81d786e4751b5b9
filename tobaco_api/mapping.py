# tobaco_api/mapping.py
# Proyección campo a campo entre modelos y DTOs. No recalcula nada:
# Total y Fecha se copian tal como vienen.
from . import models, schemas


# ----- modelo -> DTO -----
def cliente_a_dto(cliente: models.Cliente) -> schemas.ClienteDTO:
    return schemas.ClienteDTO.model_validate(cliente)


def categoria_a_dto(categoria: models.Categoria) -> schemas.CategoriaDTO:
    return schemas.CategoriaDTO.model_validate(categoria)


def producto_a_dto(producto: models.Producto) -> schemas.ProductoDTO:
    return schemas.ProductoDTO.model_validate(producto)


def pedido_a_dto(pedido: models.Pedido) -> schemas.PedidoDTO:
    return schemas.PedidoDTO.model_validate(pedido)


# ----- DTO -> modelo (transitorio, sin sesión) -----
def dto_a_cliente(dto: schemas.ClienteIn, id: int | None = None) -> models.Cliente:
    return models.Cliente(Id=id, Nombre=dto.Nombre, Deuda=dto.Deuda)


def dto_a_categoria(dto: schemas.CategoriaIn, id: int | None = None) -> models.Categoria:
    return models.Categoria(Id=id, Nombre=dto.Nombre)


def dto_a_producto(dto: schemas.ProductoIn, id: int | None = None) -> models.Producto:
    return models.Producto(
        Id=id,
        Nombre=dto.Nombre,
        Precio=dto.Precio,
        CategoriaId=dto.CategoriaId,
        Stock=dto.Stock,
    )


def borrador_a_pedido(borrador: schemas.PedidoBorrador, id: int | None = None) -> models.Pedido:
    return models.Pedido(
        Id=id,
        ClienteId=borrador.ClienteId,
        Total=borrador.Total,
        Fecha=borrador.Fecha,
        MetodoPago=borrador.MetodoPago,
        PedidoProductos=[
            models.PedidoProducto(PedidoId=id, ProductoId=l.ProductoId, Cantidad=l.Cantidad)
            for l in borrador.PedidoProductos
        ],
    )
