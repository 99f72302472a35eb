"""initial_schema

Crea las tablas de contratos, partidas, documentos, embarques, liquidación
de licencias, roles y usuarios.

Revision ID: 3c7d2e9a41b0
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c7d2e9a41b0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'rol',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.String(length=300), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('nombre'),
    )
    op.create_table(
        'permiso_rol',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('rol_id', sa.Integer(), nullable=False),
        sa.Column('recurso', sa.String(length=50), nullable=False),
        sa.Column('acciones', sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(['rol_id'], ['rol.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('rol_id', 'recurso', name='uq_permiso_rol_recurso'),
    )
    op.create_index('ix_permiso_rol_rol_id', 'permiso_rol', ['rol_id'])

    op.create_table(
        'usuario',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=False),
        sa.Column('password_hash', sa.String(length=200), nullable=False),
        sa.Column('nombre_completo', sa.String(length=300), nullable=True),
        sa.Column('rol_id', sa.Integer(), nullable=True),
        sa.Column('activo', sa.Boolean(), nullable=False),
        sa.Column('ultimo_acceso', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['rol_id'], ['rol.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('username'),
    )

    op.create_table(
        'contrato',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('empresa', sa.String(length=20), nullable=False),
        sa.Column('numero_contrato', sa.String(length=50), nullable=False),
        sa.Column('comprador', sa.String(length=200), nullable=True),
        sa.Column('fecha_venta', sa.Date(), nullable=True),
        sa.Column('cosecha', sa.String(length=9), nullable=True),
        sa.Column('tipo_cafe', sa.String(length=200), nullable=True),
        sa.Column('mes_mercado', sa.String(length=20), nullable=True),
        sa.Column('mes_embarque', sa.String(length=20), nullable=True),
        sa.Column('diferencial', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('cert_rainforest', sa.Boolean(), nullable=False),
        sa.Column('cert_organico', sa.Boolean(), nullable=False),
        sa.Column('cert_fairtrade', sa.Boolean(), nullable=False),
        sa.Column('cert_eudr', sa.Boolean(), nullable=False),
        sa.Column('terminado', sa.Boolean(), nullable=False),
        sa.Column('alquiler_licencia', sa.Boolean(), nullable=False),
        sa.Column('fecha_creacion', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_contrato_empresa', 'contrato', ['empresa'])

    op.create_table(
        'partida',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contrato_id', sa.Integer(), nullable=False),
        sa.Column('numero', sa.String(length=50), nullable=True),
        sa.Column('num_bultos', sa.Integer(), nullable=True),
        sa.Column('peso_kg', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('peso_qq', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('tipo_empaque', sa.String(length=100), nullable=True),
        sa.Column('clase_empaque', sa.String(length=30), nullable=True),
        sa.Column('marcas', sa.String(length=500), nullable=True),
        sa.Column('estado_marcas', sa.String(length=20), nullable=False),
        sa.Column('fijacion', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('fecha_fijacion', sa.Date(), nullable=True),
        sa.Column('precio_final', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('tipo_transporte', sa.String(length=20), nullable=True),
        sa.Column('destino', sa.String(length=200), nullable=True),
        sa.Column('isf_requerido', sa.Boolean(), nullable=False),
        sa.Column('isf_enviado', sa.Boolean(), nullable=False),
        sa.Column('booking', sa.String(length=100), nullable=True),
        sa.Column('naviera', sa.String(length=100), nullable=True),
        sa.Column('contenedor', sa.String(length=50), nullable=True),
        sa.Column('marchamo', sa.String(length=50), nullable=True),
        sa.Column('bl_numero', sa.String(length=50), nullable=True),
        sa.Column('fecha_cutoff', sa.Date(), nullable=True),
        sa.Column('etd', sa.Date(), nullable=True),
        sa.Column('factura_numero', sa.String(length=30), nullable=True),
        sa.Column('duca_simplificada', sa.String(length=50), nullable=True),
        sa.Column('duca_complementaria', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contrato_id'], ['contrato.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_partida_contrato_id', 'partida', ['contrato_id'])

    op.create_table(
        'registro_embalaje',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('partida_id', sa.Integer(), nullable=False),
        sa.Column('material', sa.String(length=100), nullable=False),
        sa.Column('requerido', sa.Integer(), nullable=False),
        sa.Column('comprado', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['partida_id'], ['partida.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_registro_embalaje_partida_id', 'registro_embalaje', ['partida_id'])

    op.create_table(
        'deduccion_liquidacion',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contrato_id', sa.Integer(), nullable=False),
        sa.Column('concepto', sa.String(length=200), nullable=False),
        sa.Column('monto', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.ForeignKeyConstraint(['contrato_id'], ['contrato.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_deduccion_liquidacion_contrato_id', 'deduccion_liquidacion', ['contrato_id'])

    op.create_table(
        'pago_licencia',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('contrato_id', sa.Integer(), nullable=False),
        sa.Column('fecha', sa.Date(), nullable=False),
        sa.Column('monto', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('referencia', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contrato_id'], ['contrato.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pago_licencia_contrato_id', 'pago_licencia', ['contrato_id'])

    op.create_table(
        'documento',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('empresa', sa.String(length=20), nullable=False),
        sa.Column('tipo', sa.String(length=20), nullable=False),
        sa.Column('numero', sa.String(length=30), nullable=True),
        sa.Column('tipo_factura', sa.String(length=20), nullable=True),
        sa.Column('fecha_emision', sa.Date(), nullable=False),
        sa.Column('contrato_id', sa.Integer(), nullable=True),
        sa.Column('cliente', sa.String(length=300), nullable=True),
        sa.Column('consignatario', sa.String(length=300), nullable=True),
        sa.Column('destino', sa.String(length=200), nullable=True),
        sa.Column('producto', sa.String(length=300), nullable=True),
        sa.Column('lineas', sa.JSON(), nullable=True),
        sa.Column('ajustes', sa.JSON(), nullable=True),
        sa.Column('anticipos', sa.JSON(), nullable=True),
        sa.Column('subtotal', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('total_monto', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('total_peso_neto', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('total_peso_bruto', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('detalle', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contrato_id'], ['contrato.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_documento_empresa', 'documento', ['empresa'])
    op.create_index('ix_documento_tipo', 'documento', ['tipo'])

    op.create_table(
        'secuencia_documento',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('clave', sa.String(length=60), nullable=False),
        sa.Column('ultimo', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('clave'),
    )

    op.create_table(
        'embarque',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('empresa', sa.String(length=20), nullable=False),
        sa.Column('contrato_id', sa.Integer(), nullable=False),
        sa.Column('estado', sa.String(length=20), nullable=False),
        sa.Column('destino', sa.String(length=200), nullable=True),
        sa.Column('booking', sa.String(length=100), nullable=True),
        sa.Column('naviera', sa.String(length=100), nullable=True),
        sa.Column('buque', sa.String(length=100), nullable=True),
        sa.Column('fecha_creacion', sa.Date(), nullable=False),
        sa.Column('fecha_zarpe', sa.Date(), nullable=True),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['contrato_id'], ['contrato.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_embarque_empresa', 'embarque', ['empresa'])
    op.create_index('ix_embarque_contrato_id', 'embarque', ['contrato_id'])

    op.create_table(
        'embarque_partida',
        sa.Column('embarque_id', sa.Integer(), nullable=False),
        sa.Column('partida_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['embarque_id'], ['embarque.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['partida_id'], ['partida.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('embarque_id', 'partida_id'),
    )

    op.create_table(
        'tarea_embarque',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('embarque_id', sa.Integer(), nullable=False),
        sa.Column('clave', sa.String(length=50), nullable=False),
        sa.Column('etiqueta', sa.String(length=200), nullable=False),
        sa.Column('categoria', sa.String(length=30), nullable=False),
        sa.Column('prioridad', sa.String(length=10), nullable=False),
        sa.Column('estado', sa.String(length=20), nullable=False),
        sa.Column('orden', sa.Integer(), nullable=False),
        sa.Column('fecha_limite', sa.Date(), nullable=True),
        sa.Column('fecha_completado', sa.Date(), nullable=True),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['embarque_id'], ['embarque.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tarea_embarque_embarque_id', 'tarea_embarque', ['embarque_id'])


def downgrade() -> None:
    op.drop_index('ix_tarea_embarque_embarque_id', table_name='tarea_embarque')
    op.drop_table('tarea_embarque')
    op.drop_table('embarque_partida')
    op.drop_index('ix_embarque_contrato_id', table_name='embarque')
    op.drop_index('ix_embarque_empresa', table_name='embarque')
    op.drop_table('embarque')
    op.drop_table('secuencia_documento')
    op.drop_index('ix_documento_tipo', table_name='documento')
    op.drop_index('ix_documento_empresa', table_name='documento')
    op.drop_table('documento')
    op.drop_index('ix_pago_licencia_contrato_id', table_name='pago_licencia')
    op.drop_table('pago_licencia')
    op.drop_index('ix_deduccion_liquidacion_contrato_id', table_name='deduccion_liquidacion')
    op.drop_table('deduccion_liquidacion')
    op.drop_index('ix_registro_embalaje_partida_id', table_name='registro_embalaje')
    op.drop_table('registro_embalaje')
    op.drop_index('ix_partida_contrato_id', table_name='partida')
    op.drop_table('partida')
    op.drop_index('ix_contrato_empresa', table_name='contrato')
    op.drop_table('contrato')
    op.drop_table('usuario')
    op.drop_index('ix_permiso_rol_rol_id', table_name='permiso_rol')
    op.drop_table('permiso_rol')
    op.drop_table('rol')
