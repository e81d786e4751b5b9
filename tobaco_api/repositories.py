# tobaco_api/repositories.py
# Acceso a datos por entidad, sin reglas de negocio. Cada repositorio
# recibe la sesión de la petición; el commit lo decide quien llama.
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .exceptions import CategoriaDuplicadaError, NoEncontradoError, PedidoNoEncontradoError


class RepositorioBase:
    modelo = None
    entidad = "Registro"
    error_no_encontrado = NoEncontradoError

    def __init__(self, db: Session):
        self.db = db

    def obtener_todos(self) -> list:
        return self.db.query(self.modelo).order_by(self.modelo.Id).all()

    def obtener_por_id(self, id: int):
        obj = self.db.query(self.modelo).filter(self.modelo.Id == id).first()
        if obj is None:
            raise self.error_no_encontrado(id, self.entidad)
        return obj

    def existe(self, id: int) -> bool:
        return self.db.query(self.modelo.Id).filter(self.modelo.Id == id).first() is not None

    def agregar(self, obj):
        """Inserta y hace flush para que ``obj.Id`` quede asignado."""
        self.db.add(obj)
        self.db.flush()
        return obj

    def actualizar(self, obj):
        """Reemplaza las columnas de la fila ``obj.Id``.

        ``obj`` es un objeto transitorio con el estado nuevo; se lee la fila
        actual y se le copian los valores. Lanza ``NoEncontradoError`` si la
        fila no existe.
        """
        existente = self.obtener_por_id(obj.Id)
        for columna in inspect(self.modelo).column_attrs:
            if columna.key != "Id":
                setattr(existente, columna.key, getattr(obj, columna.key))
        self.db.flush()
        return existente

    def eliminar(self, id: int) -> bool:
        obj = self.db.get(self.modelo, id)
        if obj is None:
            return False
        self.db.delete(obj)
        self.db.flush()
        return True


class RepositorioCliente(RepositorioBase):
    modelo = models.Cliente
    entidad = "Cliente"

    def tiene_pedidos(self, id: int) -> bool:
        return self.db.query(models.Pedido.Id).filter(models.Pedido.ClienteId == id).first() is not None


class RepositorioCategoria(RepositorioBase):
    modelo = models.Categoria
    entidad = "Categoría"

    def obtener_por_nombre(self, nombre: str) -> models.Categoria | None:
        return self.db.query(models.Categoria).filter(models.Categoria.Nombre == nombre).first()

    def en_uso(self, id: int) -> bool:
        return self.db.query(models.Producto.Id).filter(models.Producto.CategoriaId == id).first() is not None

    # La restricción UNIQUE es la última palabra si dos peticiones
    # crean el mismo nombre a la vez.
    def agregar(self, categoria):
        try:
            return super().agregar(categoria)
        except IntegrityError as exc:
            raise CategoriaDuplicadaError(categoria.Nombre) from exc

    def actualizar(self, categoria):
        try:
            return super().actualizar(categoria)
        except IntegrityError as exc:
            raise CategoriaDuplicadaError(categoria.Nombre) from exc


class RepositorioProducto(RepositorioBase):
    modelo = models.Producto
    entidad = "Producto"

    def obtener_por_ids(self, ids) -> dict[int, models.Producto]:
        ids = list(ids)
        if not ids:
            return {}
        productos = self.db.query(models.Producto).filter(models.Producto.Id.in_(ids)).all()
        return {p.Id: p for p in productos}

    def en_uso(self, id: int) -> bool:
        return (
            self.db.query(models.PedidoProducto.PedidoId)
            .filter(models.PedidoProducto.ProductoId == id)
            .first()
            is not None
        )


class RepositorioPedido(RepositorioBase):
    modelo = models.Pedido
    entidad = "Pedido"
    error_no_encontrado = PedidoNoEncontradoError

    def actualizar_con_lineas(self, pedido: models.Pedido) -> models.Pedido:
        """Reemplaza todas las líneas del pedido ``pedido.Id`` por las de ``pedido``.

        Borra las líneas actuales, inserta copias de las nuevas y copia
        Total, Fecha, ClienteId y MetodoPago. No hace commit: la atomicidad
        la da la transacción de quien llama.
        """
        existente = (
            self.db.query(models.Pedido)
            .filter(models.Pedido.Id == pedido.Id)
            .with_for_update()
            .first()
        )
        if existente is None:
            raise PedidoNoEncontradoError(pedido.Id)

        # flush entre borrar e insertar: la PK (PedidoId, ProductoId) se repite
        existente.PedidoProductos.clear()
        self.db.flush()

        existente.PedidoProductos.extend(
            models.PedidoProducto(ProductoId=linea.ProductoId, Cantidad=linea.Cantidad)
            for linea in pedido.PedidoProductos
        )
        existente.Total = pedido.Total
        existente.Fecha = pedido.Fecha
        existente.ClienteId = pedido.ClienteId
        existente.MetodoPago = pedido.MetodoPago
        self.db.flush()
        return existente
