# Base de datos aislada para las pruebas: SQLite en memoria compartida
# (StaticPool), fijada antes de importar la app.
import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tobaco_api.db import engine, make_session_factory
from tobaco_api.models import Base, Categoria, Cliente, Producto


@pytest.fixture(autouse=True)
def esquema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def session_factory():
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def datos(db):
    """Cliente 7, categoría 1 y productos 3 (10.00) y 5 (4.50)."""
    db.add(Cliente(Id=7, Nombre="Kiosco Centro", Deuda=Decimal("0.00")))
    db.add(Categoria(Id=1, Nombre="Cigarrillos"))
    db.flush()
    db.add_all([
        Producto(Id=3, Nombre="Marlboro Box", Precio=Decimal("10.00"), Stock=Decimal("100"), CategoriaId=1),
        Producto(Id=5, Nombre="Encendedor", Precio=Decimal("4.50"), Stock=Decimal("50"), CategoriaId=1),
        Producto(Id=8, Nombre="Papelillos", Precio=Decimal("1.25"), Stock=Decimal("30"), CategoriaId=1),
    ])
    db.commit()
    return db


@pytest.fixture
def client():
    from tobaco_api.main import app

    with TestClient(app) as c:
        yield c
