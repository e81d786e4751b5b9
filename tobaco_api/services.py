# tobaco_api/services.py
import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from . import mapping, models, schemas
from .db import transaccion
from .exceptions import (
    CantidadInvalidaError,
    CategoriaDuplicadaError,
    CategoriaEnUsoError,
    ClienteConPedidosError,
    LineaDuplicadaError,
    ProductoEnUsoError,
    ProductoNoEncontradoError,
    ReferenciaNoEncontradaError,
    ValidacionError,
)
from .repositories import (
    RepositorioCategoria,
    RepositorioCliente,
    RepositorioPedido,
    RepositorioProducto,
)

logger = logging.getLogger(__name__)

CENTAVOS = Decimal("0.01")
MAX_NOMBRE_CATEGORIA = 100


def ahora() -> datetime:
    return datetime.now(timezone.utc)


def calcular_total(lineas, precios: dict[int, Decimal]) -> Decimal:
    """Suma precio × cantidad de cada línea, redondeado a 2 decimales (half-up)."""
    total = sum((Decimal(precios[l.ProductoId]) * Decimal(l.Cantidad) for l in lineas), Decimal("0"))
    return total.quantize(CENTAVOS, rounding=ROUND_HALF_UP)


# ---------------- Pedidos ----------------
class ServicioPedido:
    """Camino de escritura de pedidos.

    Todas las validaciones (cantidades, productos repetidos, cliente y
    productos existentes) se hacen antes de escribir. La escritura
    (cabecera, líneas y total) va en una sola transacción: o queda el
    pedido completo o no queda nada.
    """

    def __init__(
        self,
        db: Session,
        pedidos: RepositorioPedido,
        productos: RepositorioProducto,
        clientes: RepositorioCliente,
    ):
        self.db = db
        self.pedidos = pedidos
        self.productos = productos
        self.clientes = clientes

    @classmethod
    def desde_sesion(cls, db: Session) -> "ServicioPedido":
        return cls(db, RepositorioPedido(db), RepositorioProducto(db), RepositorioCliente(db))

    def listar_pedidos(self) -> list[schemas.PedidoDTO]:
        return [mapping.pedido_a_dto(p) for p in self.pedidos.obtener_todos()]

    def obtener_pedido(self, id: int) -> schemas.PedidoDTO:
        return mapping.pedido_a_dto(self.pedidos.obtener_por_id(id))

    def crear_pedido(self, borrador: schemas.PedidoBorrador) -> schemas.PedidoDTO:
        precios = self._validar(borrador)

        pedido = mapping.borrador_a_pedido(borrador)
        pedido.Fecha = ahora()
        pedido.Total = calcular_total(pedido.PedidoProductos, precios)

        with transaccion(self.db):
            # cabecera sin líneas para obtener el Id
            cabecera = self.pedidos.agregar(
                models.Pedido(
                    ClienteId=pedido.ClienteId,
                    MetodoPago=pedido.MetodoPago,
                    Fecha=pedido.Fecha,
                    Total=Decimal("0.00"),
                )
            )
            pedido.Id = cabecera.Id
            guardado = self.pedidos.actualizar_con_lineas(pedido)

        logger.info(
            "Pedido %s creado: cliente=%s lineas=%d total=%s",
            guardado.Id, guardado.ClienteId, len(guardado.PedidoProductos), guardado.Total,
        )
        return mapping.pedido_a_dto(guardado)

    def actualizar_pedido(self, id: int, borrador: schemas.PedidoBorrador) -> schemas.PedidoDTO:
        if not self.pedidos.existe(id):
            raise self.pedidos.error_no_encontrado(id)
        precios = self._validar(borrador)

        pedido = mapping.borrador_a_pedido(borrador, id=id)
        pedido.Fecha = ahora()
        pedido.Total = calcular_total(pedido.PedidoProductos, precios)

        with transaccion(self.db):
            guardado = self.pedidos.actualizar_con_lineas(pedido)

        logger.info(
            "Pedido %s actualizado: lineas=%d total=%s",
            guardado.Id, len(guardado.PedidoProductos), guardado.Total,
        )
        return mapping.pedido_a_dto(guardado)

    def eliminar_pedido(self, id: int) -> bool:
        with transaccion(self.db):
            eliminado = self.pedidos.eliminar(id)
        if eliminado:
            logger.info("Pedido %s eliminado", id)
        return eliminado

    def _validar(self, borrador: schemas.PedidoBorrador) -> dict[int, Decimal]:
        """Valida el borrador y devuelve el precio de cada producto referenciado."""
        ids = []
        for linea in borrador.PedidoProductos:
            if linea.Cantidad is None or linea.Cantidad <= 0:
                raise CantidadInvalidaError(linea.ProductoId, linea.Cantidad)
            if linea.ProductoId in ids:
                raise LineaDuplicadaError(linea.ProductoId)
            ids.append(linea.ProductoId)

        if not self.clientes.existe(borrador.ClienteId):
            raise ReferenciaNoEncontradaError(borrador.ClienteId, "Cliente")

        productos = self.productos.obtener_por_ids(ids)
        for producto_id in ids:
            if producto_id not in productos:
                raise ProductoNoEncontradoError(producto_id)
        return {pid: p.Precio for pid, p in productos.items()}


# ---------------- CRUD simple ----------------
class ServicioCrud:
    """Listar/obtener/crear/actualizar/eliminar sobre un repositorio.

    Las subclases indican el repositorio, las funciones de mapeo y, si
    hace falta, las validaciones previas a escribir.
    """

    repositorio = None
    a_dto = None
    de_dto = None

    def __init__(self, db: Session, repo=None):
        self.db = db
        self.repo = repo or self.repositorio(db)

    def listar(self) -> list:
        return [self._a_dto(obj) for obj in self.repo.obtener_todos()]

    def obtener(self, id: int):
        return self._a_dto(self.repo.obtener_por_id(id))

    def crear(self, dto):
        obj = self._de_dto(dto)
        self._validar(obj)
        with transaccion(self.db):
            obj = self.repo.agregar(obj)
        logger.info("%s %s creado", self.repo.entidad, obj.Id)
        return self._a_dto(obj)

    def actualizar(self, id: int, dto):
        obj = self._de_dto(dto, id)
        self.repo.obtener_por_id(id)
        self._validar(obj)
        with transaccion(self.db):
            obj = self.repo.actualizar(obj)
        logger.info("%s %s actualizado", self.repo.entidad, id)
        return self._a_dto(obj)

    def eliminar(self, id: int) -> bool:
        self._antes_de_eliminar(id)
        with transaccion(self.db):
            eliminado = self.repo.eliminar(id)
        if eliminado:
            logger.info("%s %s eliminado", self.repo.entidad, id)
        return eliminado

    def _a_dto(self, obj):
        return type(self).a_dto(obj)

    def _de_dto(self, dto, id=None):
        return type(self).de_dto(dto, id)

    def _validar(self, obj):
        pass

    def _antes_de_eliminar(self, id):
        pass


class ServicioCliente(ServicioCrud):
    repositorio = RepositorioCliente
    a_dto = mapping.cliente_a_dto
    de_dto = mapping.dto_a_cliente

    def _antes_de_eliminar(self, id):
        if self.repo.tiene_pedidos(id):
            raise ClienteConPedidosError(id)


class ServicioCategoria(ServicioCrud):
    repositorio = RepositorioCategoria
    a_dto = mapping.categoria_a_dto
    de_dto = mapping.dto_a_categoria

    def _validar(self, categoria):
        categoria.Nombre = (categoria.Nombre or "").strip()
        if not categoria.Nombre:
            raise ValidacionError("El nombre de la categoría es obligatorio")
        if len(categoria.Nombre) > MAX_NOMBRE_CATEGORIA:
            raise ValidacionError(f"El nombre de la categoría admite hasta {MAX_NOMBRE_CATEGORIA} caracteres")
        otra = self.repo.obtener_por_nombre(categoria.Nombre)
        if otra is not None and otra.Id != categoria.Id:
            raise CategoriaDuplicadaError(categoria.Nombre)

    def _antes_de_eliminar(self, id):
        if self.repo.en_uso(id):
            raise CategoriaEnUsoError(id)


class ServicioProducto(ServicioCrud):
    repositorio = RepositorioProducto
    a_dto = mapping.producto_a_dto
    de_dto = mapping.dto_a_producto

    def __init__(self, db: Session, repo=None, categorias=None):
        super().__init__(db, repo)
        self.categorias = categorias or RepositorioCategoria(db)

    def _validar(self, producto):
        if producto.Precio is None or producto.Precio < 0:
            raise ValidacionError("El precio no puede ser negativo")
        if not self.categorias.existe(producto.CategoriaId):
            raise ReferenciaNoEncontradaError(producto.CategoriaId, "Categoría")

    def _antes_de_eliminar(self, id):
        if self.repo.en_uso(id):
            raise ProductoEnUsoError(id)
