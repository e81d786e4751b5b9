# tobaco_api/main.py
import logging

from fastapi import Depends, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import config, models, schemas
from .db import SessionLocal, engine
from .exceptions import (
    AlmacenamientoError,
    ErrorDominio,
    NoEncontradoError,
    PedidoNoEncontradoError,
    ValidacionError,
)
from .services import ServicioCategoria, ServicioCliente, ServicioPedido, ServicioProducto

# ----- Logging -----
logger = logging.getLogger("tobaco_api")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

if config.CREATE_ALL:
    models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="Tobaco API")


# ----- DB -----
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def servicio_clientes(db: Session = Depends(get_db)) -> ServicioCliente:
    return ServicioCliente(db)


def servicio_categorias(db: Session = Depends(get_db)) -> ServicioCategoria:
    return ServicioCategoria(db)


def servicio_productos(db: Session = Depends(get_db)) -> ServicioProducto:
    return ServicioProducto(db)


def servicio_pedidos(db: Session = Depends(get_db)) -> ServicioPedido:
    return ServicioPedido.desde_sesion(db)


# ----- Errores -----
@app.exception_handler(ErrorDominio)
async def error_dominio(request: Request, exc: ErrorDominio):
    if isinstance(exc, AlmacenamientoError):
        logger.error(
            "Error de base de datos en %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.exception_handler(RequestValidationError)
async def error_validacion(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=ValidacionError.status_code,
        content={"detail": jsonable_encoder(exc.errors()), "error": ValidacionError.__name__},
    )


@app.exception_handler(SQLAlchemyError)
async def error_base_datos(request: Request, exc: SQLAlchemyError):
    logger.exception("Error de base de datos en %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=AlmacenamientoError.status_code,
        content={"detail": "Error de base de datos", "error": AlmacenamientoError.__name__},
    )


def _sin_contenido(eliminado: bool, error: NoEncontradoError) -> Response:
    if not eliminado:
        raise error
    return Response(status_code=204)


# ---------------- CLIENTES ----------------
@app.get("/clientes", response_model=list[schemas.ClienteDTO])
def listar_clientes(servicio: ServicioCliente = Depends(servicio_clientes)):
    return servicio.listar()


@app.get("/clientes/{cid}", response_model=schemas.ClienteDTO)
def obtener_cliente(cid: int, servicio: ServicioCliente = Depends(servicio_clientes)):
    return servicio.obtener(cid)


@app.post("/clientes", response_model=schemas.ClienteDTO, status_code=201)
def crear_cliente(c: schemas.ClienteIn, servicio: ServicioCliente = Depends(servicio_clientes)):
    return servicio.crear(c)


@app.put("/clientes/{cid}", response_model=schemas.ClienteDTO)
def actualizar_cliente(cid: int, c: schemas.ClienteIn, servicio: ServicioCliente = Depends(servicio_clientes)):
    return servicio.actualizar(cid, c)


@app.delete("/clientes/{cid}", status_code=204)
def eliminar_cliente(cid: int, servicio: ServicioCliente = Depends(servicio_clientes)):
    return _sin_contenido(servicio.eliminar(cid), NoEncontradoError(cid, "Cliente"))


# ---------------- CATEGORÍAS ----------------
@app.get("/categorias", response_model=list[schemas.CategoriaDTO])
def listar_categorias(servicio: ServicioCategoria = Depends(servicio_categorias)):
    return servicio.listar()


@app.get("/categorias/{cid}", response_model=schemas.CategoriaDTO)
def obtener_categoria(cid: int, servicio: ServicioCategoria = Depends(servicio_categorias)):
    return servicio.obtener(cid)


@app.post("/categorias", response_model=schemas.CategoriaDTO, status_code=201)
def crear_categoria(c: schemas.CategoriaIn, servicio: ServicioCategoria = Depends(servicio_categorias)):
    return servicio.crear(c)


@app.put("/categorias/{cid}", response_model=schemas.CategoriaDTO)
def actualizar_categoria(cid: int, c: schemas.CategoriaIn, servicio: ServicioCategoria = Depends(servicio_categorias)):
    return servicio.actualizar(cid, c)


@app.delete("/categorias/{cid}", status_code=204)
def eliminar_categoria(cid: int, servicio: ServicioCategoria = Depends(servicio_categorias)):
    return _sin_contenido(servicio.eliminar(cid), NoEncontradoError(cid, "Categoría"))


# ---------------- PRODUCTOS ----------------
@app.get("/productos", response_model=list[schemas.ProductoDTO])
def listar_productos(servicio: ServicioProducto = Depends(servicio_productos)):
    return servicio.listar()


@app.get("/productos/{pid}", response_model=schemas.ProductoDTO)
def obtener_producto(pid: int, servicio: ServicioProducto = Depends(servicio_productos)):
    return servicio.obtener(pid)


@app.post("/productos", response_model=schemas.ProductoDTO, status_code=201)
def crear_producto(p: schemas.ProductoIn, servicio: ServicioProducto = Depends(servicio_productos)):
    return servicio.crear(p)


@app.put("/productos/{pid}", response_model=schemas.ProductoDTO)
def actualizar_producto(pid: int, p: schemas.ProductoIn, servicio: ServicioProducto = Depends(servicio_productos)):
    return servicio.actualizar(pid, p)


@app.delete("/productos/{pid}", status_code=204)
def eliminar_producto(pid: int, servicio: ServicioProducto = Depends(servicio_productos)):
    return _sin_contenido(servicio.eliminar(pid), NoEncontradoError(pid, "Producto"))


# ---------------- PEDIDOS ----------------
@app.get("/pedidos", response_model=list[schemas.PedidoDTO])
def listar_pedidos(servicio: ServicioPedido = Depends(servicio_pedidos)):
    return servicio.listar_pedidos()


@app.get("/pedidos/{pid}", response_model=schemas.PedidoDTO)
def obtener_pedido(pid: int, servicio: ServicioPedido = Depends(servicio_pedidos)):
    return servicio.obtener_pedido(pid)


@app.post("/pedidos", response_model=schemas.PedidoDTO, status_code=201)
def crear_pedido(data: schemas.PedidoBorrador, servicio: ServicioPedido = Depends(servicio_pedidos)):
    return servicio.crear_pedido(data)


@app.put("/pedidos/{pid}", response_model=schemas.PedidoDTO)
def actualizar_pedido(pid: int, data: schemas.PedidoBorrador, servicio: ServicioPedido = Depends(servicio_pedidos)):
    return servicio.actualizar_pedido(pid, data)


@app.delete("/pedidos/{pid}", status_code=204)
def eliminar_pedido(pid: int, servicio: ServicioPedido = Depends(servicio_pedidos)):
    return _sin_contenido(servicio.eliminar_pedido(pid), PedidoNoEncontradoError(pid))
