import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from exportacion_cafe.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Roles created on first start. The administrator is an ordinary role that
# happens to grant every action on every resource.
ROLES_POR_DEFECTO: dict[str, dict] = {
    "Administrador": {
        "descripcion": "Acceso total al sistema",
        "permisos": "*",
    },
    "Logística": {
        "descripcion": "Contratos, embarques y documentos de despacho",
        "permisos": {
            "DASHBOARD": ["VER"],
            "CONTRATOS": ["VER", "CREAR", "EDITAR"],
            "EMBARQUES": ["VER", "CREAR", "EDITAR", "ELIMINAR"],
            "DOCUMENTOS_PESO": ["VER", "CREAR", "EDITAR"],
            "DOCUMENTOS_CALIDAD": ["VER", "CREAR", "EDITAR"],
            "DOCUMENTOS_EMPAQUE": ["VER", "CREAR", "EDITAR"],
            "DOCUMENTOS_PORTE": ["VER", "CREAR", "EDITAR"],
        },
    },
    "Facturación": {
        "descripcion": "Facturas, instrucciones de pago y liquidaciones",
        "permisos": {
            "DASHBOARD": ["VER"],
            "CONTRATOS": ["VER"],
            "LIQUIDACIONES": ["VER", "CREAR", "EDITAR"],
            "DOCUMENTOS_FACTURA": ["VER", "CREAR", "EDITAR", "ELIMINAR"],
            "DOCUMENTOS_PAGO": ["VER", "CREAR", "EDITAR", "ELIMINAR"],
        },
    },
}


def seed_defaults(db) -> None:
    """Create the default roles and the admin user when they are missing."""
    from exportacion_cafe.models.rol import PermisoRol, Rol
    from exportacion_cafe.models.usuario import Usuario
    from exportacion_cafe.utils.constants import ACCIONES, RECURSOS
    from exportacion_cafe.utils.security import hash_password

    for nombre, definicion in ROLES_POR_DEFECTO.items():
        if db.query(Rol).filter(Rol.nombre == nombre).first() is not None:
            continue
        permisos = definicion["permisos"]
        if permisos == "*":
            permisos = {recurso: list(ACCIONES) for recurso in RECURSOS}
        rol = Rol(nombre=nombre, descripcion=definicion["descripcion"])
        rol.permisos.extend(PermisoRol(recurso=r, acciones=a) for r, a in permisos.items())
        db.add(rol)
        logger.info("Seed: rol '%s' creado", nombre)
    db.commit()

    if db.query(Usuario).count() == 0:
        admin_rol = db.query(Rol).filter(Rol.nombre == "Administrador").first()
        db.add(
            Usuario(
                username="admin",
                email=settings.ADMIN_EMAIL,
                password_hash=hash_password(settings.ADMIN_PASSWORD),
                nombre_completo="Administrador",
                rol_id=admin_rol.id,
                activo=True,
            )
        )
        db.commit()
        logger.info("Seed: usuario admin creado (%s)", settings.ADMIN_EMAIL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema is managed by alembic (`alembic upgrade head`) before start-up
    from exportacion_cafe import models  # noqa: F401
    from exportacion_cafe.database import SessionLocal

    db = SessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from exportacion_cafe.routers import auth  # noqa: E402

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])

# Contracts, lots and license settlement
from exportacion_cafe.routers import contratos  # noqa: E402

app.include_router(
    contratos.router,
    prefix=f"{settings.API_PREFIX}/contratos",
    tags=["Contratos"],
)

# Certificates, waybills, invoices
from exportacion_cafe.routers import documentos  # noqa: E402

app.include_router(
    documentos.router,
    prefix=f"{settings.API_PREFIX}/documentos",
    tags=["Documentos"],
)

# Shipments and their checklist
from exportacion_cafe.routers import embarques  # noqa: E402

app.include_router(
    embarques.router,
    prefix=f"{settings.API_PREFIX}/embarques",
    tags=["Embarques"],
)

# Alertas
from exportacion_cafe.routers import alertas  # noqa: E402

app.include_router(
    alertas.router,
    prefix=f"{settings.API_PREFIX}/alertas",
    tags=["Alertas"],
)

# Packaging overview
from exportacion_cafe.routers import embalaje  # noqa: E402

app.include_router(
    embalaje.router,
    prefix=f"{settings.API_PREFIX}/embalaje",
    tags=["Embalaje"],
)

# Role administration
from exportacion_cafe.routers import roles  # noqa: E402

app.include_router(
    roles.router,
    prefix=f"{settings.API_PREFIX}/roles",
    tags=["Roles"],
)

# User administration
from exportacion_cafe.routers import usuarios  # noqa: E402

app.include_router(
    usuarios.router,
    prefix=f"{settings.API_PREFIX}/usuarios",
    tags=["Usuarios"],
)
