# config.py
import os
from dotenv import load_dotenv

# Cargar variables del archivo .env
load_dotenv()

# Cadena de conexión (SQLite local si no se define)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tobaco.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Crear las tablas al iniciar la API (desactivar si el esquema se gestiona aparte)
CREATE_ALL = os.getenv("CREATE_ALL", "1").lower() in ("1", "true", "yes")
