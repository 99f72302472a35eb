"""Export lifecycle rules engine.

Pure, synchronous functions over snapshots of contracts, lots, documents and
roles handed in by the caller. Nothing in this package performs I/O; the
service layer reads a snapshot once per save, calls these functions and
writes the results back.

Public API
----------
resolve_harvest_year      — Harvest-year label of a date.
contract_harvest_year     — Stored or derived harvest year of a contract.
generate                  — Next document identifier for a scope (count-based).
validate_partida_numero   — Lot-number uniqueness per company + harvest year.
reconcile                 — Required vs. purchased packaging of a lot.
compute_alerts            — Sorted cut-off / ETD / packaging / marks alerts.
has_permission            — Flat role permission check.
build_task_template       — Initial checklist of a shipment.

Usage example::

    from exportacion_cafe.engine import compute_alerts

    for alerta in compute_alerts(contratos, date.today(), "dizano"):
        print(alerta.tipo, alerta.partida_numero, alerta.dias_restantes)
"""

from .alertas import Alerta, compute_alerts
from .cosecha import contract_harvest_year, harvest_year_options, resolve_harvest_year
from .derivaciones import (
    apply_weight_mode,
    certificate_weights,
    coerce_isf,
    final_price,
    invoice_totals,
    quintales_from_kg,
)
from .embalaje import LineaEmbalaje, ResumenEmbalaje, reconcile, summarize
from .errores import (
    DuplicateLotNumber,
    EngineError,
    InconsistentToggle,
    InvalidPermission,
    MissingScope,
)
from .liquidacion import default_deductions, settle
from .numeracion import (
    format_numero,
    generate,
    next_sequence,
    partida_display_number,
    sequence_scope_key,
)
from .permisos import ensure_permission, has_permission
from .tareas import build_task_template, set_task_priority, set_task_status
from .unicidad import validate_partida_numero

__all__: list[str] = [
    # Harvest year
    "resolve_harvest_year",
    "contract_harvest_year",
    "harvest_year_options",
    # Numbering
    "generate",
    "next_sequence",
    "format_numero",
    "sequence_scope_key",
    "partida_display_number",
    # Validation
    "validate_partida_numero",
    # Derivations
    "quintales_from_kg",
    "apply_weight_mode",
    "final_price",
    "coerce_isf",
    "invoice_totals",
    "certificate_weights",
    # Packaging
    "LineaEmbalaje",
    "ResumenEmbalaje",
    "reconcile",
    "summarize",
    # Alerts
    "Alerta",
    "compute_alerts",
    # Permissions
    "has_permission",
    "ensure_permission",
    # Shipment tasks
    "build_task_template",
    "set_task_status",
    "set_task_priority",
    # Settlement
    "default_deductions",
    "settle",
    # Errors
    "EngineError",
    "DuplicateLotNumber",
    "InvalidPermission",
    "InconsistentToggle",
    "MissingScope",
]
