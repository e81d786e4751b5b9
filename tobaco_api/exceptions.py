"""Errores de dominio.

Cada clase lleva el código HTTP con el que la API la responde, así los
handlers de ``main.py`` no tienen que comparar mensajes.
"""


class ErrorDominio(Exception):
    status_code = 400


# ----- No encontrado -----
class NoEncontradoError(ErrorDominio):
    status_code = 404
    entidad = "Registro"

    def __init__(self, id, entidad=None):
        self.id = id
        if entidad:
            self.entidad = entidad
        super().__init__(f"{self.entidad} con id {id} no existe")


class PedidoNoEncontradoError(NoEncontradoError):
    entidad = "Pedido"


# ----- Validación (antes de escribir nada) -----
class ValidacionError(ErrorDominio):
    status_code = 422


class CantidadInvalidaError(ValidacionError):
    def __init__(self, producto_id, cantidad):
        self.producto_id = producto_id
        self.cantidad = cantidad
        super().__init__(f"Cantidad inválida para el producto {producto_id}: {cantidad} (debe ser > 0)")


class LineaDuplicadaError(ValidacionError):
    def __init__(self, producto_id):
        self.producto_id = producto_id
        super().__init__(f"El producto {producto_id} aparece más de una vez en el pedido")


class CategoriaDuplicadaError(ValidacionError):
    status_code = 409

    def __init__(self, nombre):
        self.nombre = nombre
        super().__init__(f"Ya existe una categoría llamada '{nombre}'")


# ----- Integridad referencial -----
class ReferenciaError(ErrorDominio):
    status_code = 409


class ReferenciaNoEncontradaError(ReferenciaError):
    """Un borrador apunta a una entidad que no existe (cliente, categoría...)."""

    status_code = 404
    entidad = "Registro"

    def __init__(self, id, entidad=None):
        self.id = id
        if entidad:
            self.entidad = entidad
        super().__init__(f"{self.entidad} {id} no existe")


class ProductoNoEncontradoError(ReferenciaNoEncontradaError):
    entidad = "Producto"


class EnUsoError(ReferenciaError):
    entidad = "Registro"
    motivo = "está en uso"

    def __init__(self, id):
        self.id = id
        super().__init__(f"{self.entidad} {id} {self.motivo}")


class CategoriaEnUsoError(EnUsoError):
    entidad = "Categoría"
    motivo = "tiene productos asociados"


class ProductoEnUsoError(EnUsoError):
    entidad = "Producto"
    motivo = "figura en pedidos"


class ClienteConPedidosError(EnUsoError):
    entidad = "Cliente"
    motivo = "tiene pedidos"


# ----- Base de datos -----
class AlmacenamientoError(ErrorDominio):
    status_code = 503
